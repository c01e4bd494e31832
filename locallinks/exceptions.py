"""Custom exceptions for link store operations."""


class LinkStoreError(Exception):
    """Base exception for link store errors."""

    pass


class ValidationError(LinkStoreError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(LinkStoreError):
    """Raised when a lookup by id, slug or code finds nothing."""

    def __init__(self, resource_type: str, key: str):
        message = f"{resource_type} '{key}' not found"
        super().__init__(message)
        self.resource_type = resource_type
        self.key = key


class DuplicateError(LinkStoreError):
    """Raised when attempting to create a duplicate resource."""

    def __init__(self, resource_type: str, field: str, value: str):
        message = f"{resource_type} with {field} '{value}' already exists"
        super().__init__(message)
        self.resource_type = resource_type
        self.field = field
        self.value = value


class DatabaseError(LinkStoreError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error
