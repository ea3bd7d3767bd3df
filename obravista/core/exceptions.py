"""Custom exceptions for the ObraVista application."""


class ObraVistaException(Exception):
    """Base exception for ObraVista application."""
    
    pass


class ValidationError(ObraVistaException, ValueError):
    """Raised when validation fails."""
    
    pass


class NotFoundError(ObraVistaException):
    """Raised when a resource is not found."""
    
    pass


class DatabaseError(ObraVistaException):
    """Raised when a database operation fails."""
    
    pass


class ServiceError(ObraVistaException):
    """Raised when a service operation fails."""
    
    pass


class ConfigurationError(ObraVistaException):
    """Raised when configuration is invalid."""
    
    pass


class AuthenticationError(ObraVistaException):
    """Raised when authentication fails."""
    
    pass


class AuthorizationError(ObraVistaException):
    """Raised when an authenticated user lacks access to a page or action."""

    pass


class ApiFailure(ObraVistaException):
    """Raised by the API client on transport errors or ``success=false`` envelopes."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
