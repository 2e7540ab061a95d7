"""
Exception hierarchy for record processing and re-ingestion
"""

from typing import Optional


class ProcessorError(Exception):
    """Base class for all processor errors"""
    pass


class DecodeError(ProcessorError):
    """Raised when a record payload cannot be decompressed or parsed into an envelope"""
    pass


class SerializationError(ProcessorError):
    """Raised when a single output record cannot be encoded"""
    pass


class SourceResolutionError(ProcessorError):
    """Raised when the re-ingestion target cannot be determined"""
    pass


class ConfigurationError(SourceResolutionError):
    """Raised when the upstream identifiers are both set or both missing"""
    pass


class ParseError(SourceResolutionError):
    """Raised when an upstream identifier does not follow the ARN grammar"""

    def __init__(self, identifier: str, segment: str, position: Optional[int] = None, reason: Optional[str] = None):
        self.identifier = identifier
        self.segment = segment
        self.position = position
        detail = f"unable to parse {segment}"
        if position is not None:
            detail += f" at segment {position}"
        if reason:
            detail += f" ({reason})"
        super().__init__(f"{detail}: '{identifier}'")


class ReingestError(ProcessorError):
    """Raised when re-ingestion records could not be republished"""

    def __init__(self, message: str, failed_records: int = 0):
        self.failed_records = failed_records
        super().__init__(message)
