# parkki/exceptions.py
"""
Error taxonomy for the ingestion pipeline.

ValidationError and StorageError reach the caller of submit_events.
DeliveryError never leaves the broadcast hub.
"""


class ParkkiError(Exception):
    """Base class for every error raised by the pipeline."""


class ValidationError(ParkkiError):
    """A payload in the batch is malformed or out of range. Nothing was persisted."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class StorageError(ParkkiError):
    """The batch transaction failed and was rolled back."""

    def __init__(self, message: str = "Failed to persist events"):
        super().__init__(message)
        self.message = message


class DeliveryError(ParkkiError):
    """A single subscriber could not be sent a notification."""

    def __init__(self, handle, reason: str):
        super().__init__(reason)
        self.handle = handle
        self.reason = reason
