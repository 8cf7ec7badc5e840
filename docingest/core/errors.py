"""
Exception types raised by the DocIngest pipeline.
"""


class DocIngestError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(DocIngestError, ValueError):
    """Raised when the run configuration cannot be honoured. Aborts the run."""


class UnsupportedFormatError(ConfigurationError):
    """Raised by a document generator for an output format it cannot produce."""


class ExtractionError(DocIngestError):
    """
    Raised when the content of a single file group cannot be read
    (corrupt image, unreadable PDF, ...). Isolated to that group.
    """
