"""
Docker Engine API client - typed client for the Docker Engine REST API v1.45
Works with the Docker daemon via Unix socket or TCP/TLS
"""

import logging

from .client import DockerClient
from .config import API_VERSION, ClientConfig
from .exceptions import (
    ClientError,
    Conflict,
    DockerException,
    ErrorKind,
    InvalidParameter,
    NotFound,
    ServerError,
    TransportError,
)
from .http_client import DockerResponse, DockerStream
from .models import ContainerCreateRequest, ContainerUpdateRequest

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'API_VERSION',
    'ClientConfig',
    'ClientError',
    'Conflict',
    'ContainerCreateRequest',
    'ContainerUpdateRequest',
    'DockerClient',
    'DockerException',
    'DockerResponse',
    'DockerStream',
    'ErrorKind',
    'InvalidParameter',
    'NotFound',
    'ServerError',
    'TransportError',
]

__version__ = '1.0.0'
