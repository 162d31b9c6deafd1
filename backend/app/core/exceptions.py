"""Custom exception classes"""

from typing import Any, Optional


class SmarterAIException(Exception):
    """Base exception for the recruiting backend"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(SmarterAIException):
    """Invalid input supplied by a caller"""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class NotFoundException(SmarterAIException):
    """Candidate, file, template or stored object lookup returned nothing"""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class ConflictException(SmarterAIException):
    """Resource conflict, e.g. an analysis token claimed twice"""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, status_code=409, details=details)


class ParseException(SmarterAIException):
    """Text-generation reply did not contain the expected JSON payload"""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, status_code=422, details=details)


class UpstreamException(SmarterAIException):
    """A third-party service call (text generation, storage) failed"""

    def __init__(self, service: str, message: str):
        self.service = service
        full_message = f"External service error ({service}): {message}"
        super().__init__(full_message, status_code=502, details={"service": service})


class BackgroundJobException(SmarterAIException):
    """Exception for background job errors"""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)
