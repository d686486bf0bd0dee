from typing import Any, Dict, Optional

class RequestBuilderError(Exception):
    """Base exception class for all requestbuilder exceptions"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ConfigError(RequestBuilderError):
    """Raised when there is a configuration error"""
    pass

class LoggerError(RequestBuilderError):
    """Raised when there is a logging error"""
    pass

class InvalidArgumentError(RequestBuilderError, ValueError):
    """Raised when a builder argument cannot be used in a request"""
    pass

class SerializationError(RequestBuilderError):
    """Raised when a request body cannot be serialized"""
    pass

class ValidationError(RequestBuilderError):
    """Raised when data validation fails"""
    pass
