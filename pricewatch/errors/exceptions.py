"""Custom exception hierarchy for data ingestion errors."""


class DataIngestionError(Exception):
    """Base exception for all data ingestion errors."""
    
    def __init__(self, message: str, *args, **kwargs):
        """Initialize error with message."""
        self.message = message
        super().__init__(message, *args, **kwargs)


class ValidationError(DataIngestionError):
    """Raised when input validation fails."""
    pass


class ConsistencyError(DataIngestionError):
    """Raised when stored state contradicts itself.

    A product with recorded price history that cannot be found by its
    (category, name) identity is the canonical case. The run is aborted.
    """
    pass


class DatabaseError(DataIngestionError):
    """Raised when database operations fail."""
    pass


class ResourceNotFoundError(DataIngestionError):
    """Raised when a catalog row looked up by id does not exist."""

    def __init__(self, resource: str, field: str, value):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} not found with {field}: '{value}'")
