"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~oasmodel.exceptions.OasModelError` subclass.
External tooling (CI scripts, shell wrappers) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ oasmodel convert broken.yaml --to 2.0
    $ echo $?
    7   # EXIT_DOCUMENT_PARSE_ERROR -- a recognised field held a malformed value
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command or library entry point was invoked with invalid arguments."""

EXIT_DOCUMENT_PARSE_ERROR = 7
"""The API description document could not be loaded or parsed."""

EXIT_REFERENCE_ERROR = 8
"""A reference pointer was malformed or could not be resolved."""

EXIT_SERIALIZATION_ERROR = 9
"""An element could not be expressed in the requested spec version."""
