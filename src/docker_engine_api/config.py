"""
Client configuration
Connection endpoint and options, resolved once when a client is built
"""

import copy
import json
import logging
import os
import platform
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

from .exceptions import InvalidParameter

logger = logging.getLogger(__name__)

API_VERSION = 'v1.45'
DEFAULT_UNIX_SOCKET = '/var/run/docker.sock'
MACOS_USER_SOCKET = '~/.docker/run/docker.sock'

DEFAULT_OPTIONS: Dict[str, Any] = {
    'timeout': 60,
    'connect_timeout': 10,
    'headers': {
        'Content-Type': 'application/json',
        'Accept': 'application/json',
    },
    'verify': True,
    'cert': None,
    'ssl_key': None,
}

TLS_OPTIONS = ('verify', 'cert', 'ssl_key')


def default_base_url() -> str:
    """Docker endpoint to use when none is given"""
    env_host = os.environ.get('DOCKER_HOST')
    if env_host:
        return env_host

    if platform.system() == 'Darwin':
        user_socket = os.path.expanduser(MACOS_USER_SOCKET)
        if os.path.exists(user_socket):
            return f'unix://{user_socket}'

    return f'unix://{DEFAULT_UNIX_SOCKET}'


class ClientConfig:
    """
    Resolved connection settings

    Attributes:
        scheme: 'unix', 'http' or 'https'
        socket_path: Unix socket path (unix scheme only)
        host: TCP host ('localhost' for unix sockets)
        port: TCP port, None for the scheme default
        base_path: Path prefix added to every request, ends with /v1.45
        options: Merged options (timeouts, headers, TLS)
    """

    def __init__(self, base_url: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        self.options = self._merge_options(options or {})
        self.base_url = base_url or default_base_url()
        self.socket_path: Optional[str] = None
        self.port: Optional[int] = None
        self._parse_base_url(self.base_url)

    @staticmethod
    def _merge_options(options: Dict[str, Any]) -> Dict[str, Any]:
        unknown = [key for key in options if key not in DEFAULT_OPTIONS]
        if unknown:
            raise InvalidParameter(
                f"Unknown client option(s): {', '.join(sorted(unknown))}. "
                f"Valid options are: {', '.join(DEFAULT_OPTIONS)}"
            )

        merged = copy.deepcopy(DEFAULT_OPTIONS)
        for key, value in options.items():
            if key == 'headers':
                merged['headers'].update(value or {})
            else:
                merged[key] = value

        for key in ('timeout', 'connect_timeout'):
            value = merged[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise InvalidParameter(f"Option '{key}' must be a positive number")
        return merged

    def _parse_base_url(self, base_url: str):
        if base_url.startswith('unix://'):
            self.scheme = 'unix'
            self.socket_path = base_url[len('unix://'):]
            if not self.socket_path:
                raise InvalidParameter("Unix socket path cannot be empty")
            self.host = 'localhost'
            self.base_path = f'/{API_VERSION}'
            return

        if base_url.startswith('tcp://'):
            scheme = 'https' if self.uses_tls_options else 'http'
            base_url = f'{scheme}://{base_url[len("tcp://"):]}'

        parts = urlsplit(base_url)
        if parts.scheme not in ('http', 'https') or not parts.hostname:
            raise InvalidParameter(f"Unsupported Docker endpoint: {base_url}")

        self.scheme = parts.scheme
        self.host = parts.hostname
        self.port = parts.port

        path = parts.path.rstrip('/')
        if f'/{API_VERSION}' not in path:
            path = f'{path}/{API_VERSION}'
        self.base_path = path

    @property
    def uses_tls_options(self) -> bool:
        return bool(self.options.get('cert')) or isinstance(self.options.get('verify'), str)

    @property
    def timeout(self) -> float:
        return self.options['timeout']

    @property
    def connect_timeout(self) -> float:
        return self.options['connect_timeout']

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.options['headers'])

    @property
    def logical_base_uri(self) -> str:
        """Base URI the requests are addressed to"""
        if self.scheme == 'unix':
            return f'http://localhost{self.base_path}'
        netloc = self.host if self.port is None else f'{self.host}:{self.port}'
        return f'{self.scheme}://{netloc}{self.base_path}'

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None,
                 options: Optional[Dict[str, Any]] = None) -> 'ClientConfig':
        """
        Build a config from the standard Docker environment variables

        Args:
            environ: Environment mapping (default: os.environ)
            options: Extra options merged over what the environment gives

        Returns:
            ClientConfig
        """
        environ = os.environ if environ is None else environ
        env_options: Dict[str, Any] = {}

        cert_path = environ.get('DOCKER_CERT_PATH')
        tls_verify = environ.get('DOCKER_TLS_VERIFY', '') not in ('', '0', 'false')
        if cert_path:
            env_options['cert'] = os.path.join(cert_path, 'cert.pem')
            env_options['ssl_key'] = os.path.join(cert_path, 'key.pem')
            if tls_verify:
                env_options['verify'] = os.path.join(cert_path, 'ca.pem')

        env_options.update(options or {})
        base_url = environ.get('DOCKER_HOST') or None
        if base_url is None:
            base_url = default_base_url()
        elif base_url.startswith('tcp://') and tls_verify:
            base_url = f'https://{base_url[len("tcp://"):]}'
        return cls(base_url, env_options)

    @classmethod
    def load(cls, path: str) -> 'ClientConfig':
        """
        Load settings from a JSON file

        The file holds {"base_url": ..., "options": {...}}; both keys are optional.
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                settings = json.load(f)
        except OSError as e:
            raise InvalidParameter(f"Cannot read client settings file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise InvalidParameter(f"Invalid client settings file {path}: {e}") from e

        if not isinstance(settings, dict):
            raise InvalidParameter(f"Client settings file {path} must hold a JSON object")

        logger.debug(f"Loaded client settings from {path}")
        return cls(settings.get('base_url'), settings.get('options'))

    def __repr__(self):
        return f"<ClientConfig: {self.base_url}>"
