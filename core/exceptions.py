"""
Domain errors raised by the services and mapped to HTTP responses in app.py.
"""
from typing import Optional


class CRMSError(Exception):
    """Base class for all domain errors."""
    status_code = 500

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(CRMSError):
    """Malformed or missing required input."""
    status_code = 400


class ReferenceNotFoundError(CRMSError):
    """A foreign reference points at a record that does not exist."""
    status_code = 400


class NotFoundError(CRMSError):
    """The addressed record does not exist."""
    status_code = 404

    def __init__(self, entity: str, record_id):
        super().__init__(f"{entity} with ID {record_id} not found")
        self.entity = entity
        self.record_id = record_id


class ConflictError(CRMSError):
    """A uniqueness constraint would be violated."""
    status_code = 409


class ReferenceInUseError(ConflictError):
    """The record is still referenced by other records."""
