"""Exception types raised outside the pure GPA core."""


class GPATrackerError(Exception):
    """Base class for tracker errors."""


class RecordNotFoundError(GPATrackerError, LookupError):
    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class InvalidRecordError(GPATrackerError, ValueError):
    """A term, course or planned module failed validation."""


class ImportFormatError(GPATrackerError, ValueError):
    """An import document does not have the expected shape."""
