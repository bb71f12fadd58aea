"""
Docker API Exceptions
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Failure tier of a Docker operation"""
    INVALID_PARAMETER = 'invalid_parameter'
    CLIENT_ERROR = 'client_error'
    SERVER_ERROR = 'server_error'
    TRANSPORT_ERROR = 'transport_error'


class DockerException(Exception):
    """Base Docker exception"""

    kind = ErrorKind.TRANSPORT_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None, response=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response


class InvalidParameter(DockerException):
    """Raised before any request is sent when an argument is malformed"""

    kind = ErrorKind.INVALID_PARAMETER


class ClientError(DockerException):
    """Daemon rejected the request (4xx)"""

    kind = ErrorKind.CLIENT_ERROR


class NotFound(ClientError):
    """Object not found (404)"""
    pass


class Conflict(ClientError):
    """Name in use or invalid state transition (409)"""
    pass


class ServerError(DockerException):
    """Daemon failed internally (5xx)"""

    kind = ErrorKind.SERVER_ERROR


class TransportError(DockerException):
    """Connection, timeout, TLS or decoding failure"""

    kind = ErrorKind.TRANSPORT_ERROR
