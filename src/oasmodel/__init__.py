"""oasmodel -- an in-memory model of Swagger 2.0 and OpenAPI 3.0/3.1 documents.

Read a document in any supported version, work with it through one
version-independent object model, and write it back out as JSON or YAML
for any version::

    from oasmodel import SpecVersion, read_document, serialize_as_json

    document = read_document(open("petstore.yaml").read())
    print(serialize_as_json(document, SpecVersion.V2))

Modules:
    models: The document element classes.
    any: Schema-free Any-values for examples, defaults and extensions.
    references: Component references, pointer syntax and resolution.
    readers: Version detection and the table-driven deserializers.
    writers: The JSON and YAML writers and serialize helpers.
    extensions: The vendor extension parser registry.
    app: Typer CLI entry point (``oasmodel convert``, ``oasmodel inspect``).
"""

__version__ = "0.1.0"

from oasmodel.exceptions import (  # noqa: E402
    DocumentParseError,
    InvalidArgumentError,
    OasModelError,
    OpenApiReferenceError,
    ReferenceCycleError,
    ReferenceNotFoundError,
    ReferenceSyntaxError,
    SerializationError,
    UnsupportedVersionError,
)
from oasmodel.readers import read_document, read_fragment  # noqa: E402
from oasmodel.references import Reference, ReferenceType, parse_reference  # noqa: E402
from oasmodel.settings import ReaderSettings, WriterSettings  # noqa: E402
from oasmodel.versions import SpecVersion  # noqa: E402
from oasmodel.writers import serialize, serialize_as_json, serialize_as_yaml  # noqa: E402

__all__ = [
    "__version__",
    "DocumentParseError",
    "InvalidArgumentError",
    "OasModelError",
    "OpenApiReferenceError",
    "ReaderSettings",
    "Reference",
    "ReferenceCycleError",
    "ReferenceNotFoundError",
    "ReferenceSyntaxError",
    "ReferenceType",
    "SerializationError",
    "SpecVersion",
    "UnsupportedVersionError",
    "WriterSettings",
    "parse_reference",
    "read_document",
    "read_fragment",
    "serialize",
    "serialize_as_json",
    "serialize_as_yaml",
]
