"""
IAM Client Exceptions
Errors raised by the transport layer and the hard-failure operations
"""

from typing import Optional


class IAMClientError(Exception):
    """Base exception for the AdminVault IAM client"""
    pass


class ConfigurationError(IAMClientError, ValueError):
    """Raised when the client is constructed with an invalid configuration"""
    pass


class TransportError(IAMClientError):
    """
    Raised when an outbound call to the administration service fails

    The underlying httpx error is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, path: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.status_code = status_code


class ResponseShapeError(TransportError):
    """Raised when the administration service answers with an unexpected body"""
    pass
