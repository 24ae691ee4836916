"""Readers -- turn YAML/JSON text into document elements.

Typical usage::

    from oasmodel.readers import read_document

    document = read_document(path.read_text())

Sub-modules:

* :mod:`~oasmodel.readers.parse_node` -- the tokenized node tree.
* :mod:`~oasmodel.readers.field_maps` -- table-driven map parsing.
* :mod:`~oasmodel.readers.v2`, :mod:`~oasmodel.readers.v3`,
  :mod:`~oasmodel.readers.v31` -- the per-version field tables and loaders.
"""

from oasmodel.readers.context import ParsingContext
from oasmodel.readers.reader import read_document, read_fragment

__all__ = ["ParsingContext", "read_document", "read_fragment"]
