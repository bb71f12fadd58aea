"""
HTTP Client for the Docker daemon
Talks to the Unix socket or a TCP/TLS endpoint using http.client
"""

import http.client
import io
import json
import logging
import socket
import ssl
from typing import Any, Dict, Iterator, Optional

from .config import ClientConfig
from .exceptions import (
    ClientError,
    Conflict,
    NotFound,
    ServerError,
    TransportError,
)

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (OSError, http.client.HTTPException)


class UnixHTTPConnection(http.client.HTTPConnection):
    """HTTP connection over Unix socket"""

    def __init__(self, socket_path: str, timeout: float = 60, connect_timeout: float = 10):
        super().__init__('localhost', timeout=timeout)
        self.socket_path = socket_path
        self.connect_timeout = connect_timeout

    def connect(self):
        """Connect to Unix socket"""
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.connect_timeout)
        try:
            sock.connect(self.socket_path)
        except OSError:
            sock.close()
            raise
        sock.settimeout(self.timeout)
        self.sock = sock


class TimeoutHTTPConnection(http.client.HTTPConnection):
    """TCP connection with a separate connect timeout"""

    def __init__(self, host: str, port: Optional[int] = None, timeout: float = 60,
                 connect_timeout: float = 10):
        super().__init__(host, port, timeout=timeout)
        self.connect_timeout = connect_timeout

    def connect(self):
        self.sock = socket.create_connection((self.host, self.port), self.connect_timeout)
        self.sock.settimeout(self.timeout)


class TimeoutHTTPSConnection(http.client.HTTPSConnection):
    """TLS connection with a separate connect timeout"""

    def __init__(self, host: str, port: Optional[int] = None, timeout: float = 60,
                 connect_timeout: float = 10, ssl_context: Optional[ssl.SSLContext] = None):
        ssl_context = ssl_context or ssl.create_default_context()
        super().__init__(host, port, timeout=timeout, context=ssl_context)
        self.connect_timeout = connect_timeout
        self.ssl_context = ssl_context

    def connect(self):
        sock = socket.create_connection((self.host, self.port), self.connect_timeout)
        sock.settimeout(self.timeout)
        try:
            self.sock = self.ssl_context.wrap_socket(sock, server_hostname=self.host)
        except (OSError, ssl.SSLError):
            sock.close()
            raise


class DockerStream:
    """
    Forward-only view of a response body

    Chunks are read from the socket on demand and never buffered as a whole.
    The stream can be consumed once; after the end is reached every read
    returns b'' and `eof` is True.
    """

    def __init__(self, raw, connection: Optional[http.client.HTTPConnection] = None,
                 chunk_size: int = 8192):
        self._raw = raw
        self._connection = connection
        self.chunk_size = chunk_size
        self._eof = False

    @property
    def eof(self) -> bool:
        return self._eof

    def read(self, size: int = -1) -> bytes:
        """
        Read up to size bytes (everything left when size is negative)

        Returns:
            Bytes read, b'' at end of stream
        """
        if self._eof:
            return b''

        try:
            if size is None or size < 0:
                data = self._raw.read()
            elif hasattr(self._raw, 'read1'):
                data = self._raw.read1(size)
            else:
                data = self._raw.read(size)
        except TRANSPORT_ERRORS as e:
            self.close()
            raise TransportError(f"Stream read failed: {e}") from e

        if not data or size is None or size < 0:
            self.close()
        return data

    def __iter__(self) -> Iterator[bytes]:
        while True:
            chunk = self.read(self.chunk_size)
            if not chunk:
                break
            yield chunk

    def iter_lines(self) -> Iterator[bytes]:
        """Yield newline-delimited records without their line terminators"""
        buffer = b''
        for chunk in self:
            buffer += chunk
            while b'\n' in buffer:
                line, buffer = buffer.split(b'\n', 1)
                yield line.rstrip(b'\r')
        if buffer:
            yield buffer

    def iter_json(self) -> Iterator[Any]:
        """Yield one decoded JSON document per line (progress/event streams)"""
        for line in self.iter_lines():
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line.decode('utf-8'))
            except ValueError as e:
                self.close()
                raise TransportError(f"Invalid JSON in stream: {e}") from e

    def close(self):
        """Release the underlying connection"""
        if self._eof:
            return
        self._eof = True
        try:
            self._raw.close()
        finally:
            if self._connection is not None:
                self._connection.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self):
        return f"<DockerStream eof={self._eof}>"


class DockerResponse:
    """Status, headers and body of one Docker API response"""

    def __init__(self, status: int, headers, content: Optional[bytes] = None,
                 raw=None, connection: Optional[http.client.HTTPConnection] = None,
                 reason: str = ''):
        self.status = status
        self.reason = reason
        self.headers = headers
        self._content = content
        self._raw = raw
        self._connection = connection
        self._stream: Optional[DockerStream] = None

    @property
    def content(self) -> bytes:
        """Whole body, read on first access"""
        if self._content is None:
            if self._stream is not None:
                raise TransportError("Response body was already consumed as a stream")
            try:
                self._content = self._raw.read() if self._raw is not None else b''
            except TRANSPORT_ERRORS as e:
                raise TransportError(f"Failed to read response body: {e}") from e
            finally:
                self.close()
        return self._content

    @property
    def text(self) -> str:
        return self.content.decode('utf-8', errors='replace')

    def json(self) -> Any:
        return json.loads(self.content.decode('utf-8'))

    def stream(self) -> DockerStream:
        """Body as a forward-only stream"""
        if self._stream is None:
            if self._content is not None or self._raw is None:
                self._stream = DockerStream(io.BytesIO(self._content or b''))
            else:
                self._stream = DockerStream(self._raw, self._connection)
        return self._stream

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup"""
        if self.headers is None:
            return default
        return self.headers.get(name, default)

    def close(self):
        if self._raw is not None:
            self._raw.close()
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __repr__(self):
        return f"<DockerResponse [{self.status}]>"


class DockerHTTPClient:
    """HTTP client for Docker daemon"""

    def __init__(self, config: Optional[ClientConfig] = None, logger: Optional[logging.Logger] = None):
        """
        Initialize Docker HTTP client

        Args:
            config: Resolved connection settings (default: auto-detect)
            logger: Logger for request/response tracing (default: module logger)
        """
        self.config = config or ClientConfig()
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.ssl_context = self._build_ssl_context() if self.config.scheme == 'https' else None

    def _build_ssl_context(self) -> ssl.SSLContext:
        options = self.config.options
        verify = options.get('verify', True)
        cert = options.get('cert')
        key = options.get('ssl_key')

        try:
            if isinstance(verify, str):
                context = ssl.create_default_context(cafile=verify)
            else:
                context = ssl.create_default_context()
                if verify is False:
                    context.check_hostname = False
                    context.verify_mode = ssl.CERT_NONE

            if cert:
                if isinstance(cert, (tuple, list)):
                    context.load_cert_chain(cert[0], cert[1])
                else:
                    context.load_cert_chain(cert, key)
        except (OSError, ssl.SSLError) as e:
            raise TransportError(f"TLS configuration failed: {e}") from e
        return context

    def _new_connection(self) -> http.client.HTTPConnection:
        config = self.config
        if config.scheme == 'unix':
            return UnixHTTPConnection(config.socket_path, timeout=config.timeout,
                                      connect_timeout=config.connect_timeout)
        if config.scheme == 'https':
            return TimeoutHTTPSConnection(config.host, config.port, timeout=config.timeout,
                                          connect_timeout=config.connect_timeout,
                                          ssl_context=self.ssl_context)
        return TimeoutHTTPConnection(config.host, config.port, timeout=config.timeout,
                                     connect_timeout=config.connect_timeout)

    def url(self, path: str) -> str:
        """Versioned request target for an API path"""
        return f"{self.config.base_path}{path}"

    def request(self, method: str, path: str, body=None,
                headers: Optional[Dict[str, str]] = None, stream: bool = False) -> DockerResponse:
        """
        Make HTTP request to Docker daemon

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, HEAD)
            path: API path including the query string
            body: RequestBody or None
            headers: Extra HTTP headers
            stream: If True, leave the body on the socket for incremental reads

        Returns:
            DockerResponse

        Raises:
            ClientError: 4xx status
            ServerError: 5xx status
            TransportError: connection, timeout or TLS failure
        """
        url = self.url(path)

        req_headers = self.config.headers
        payload = None
        if body is not None:
            payload = body.content
            req_headers['Content-Type'] = body.content_type
            req_headers['Content-Length'] = str(len(payload))
        if headers:
            req_headers.update(headers)

        self.logger.debug(
            f"Docker API request: {method} {url}",
            extra={'docker_method': method, 'docker_uri': url,
                   'docker_headers': _redact(req_headers)}
        )

        conn = self._new_connection()
        try:
            conn.request(method, url, body=payload, headers=req_headers)
            response = conn.getresponse()
        except TRANSPORT_ERRORS as e:
            conn.close()
            self.logger.error(f"Docker API request error: {method} {url}: {e}")
            raise TransportError(f"Request failed: {e}") from e

        self.logger.debug(
            f"Docker API response: {response.status}",
            extra={'docker_status': response.status, 'docker_headers': dict(response.headers.items())}
        )

        if response.status >= 400:
            self._raise_for_status(method, url, conn, response)

        if stream:
            return DockerResponse(response.status, response.headers, raw=response,
                                  connection=conn, reason=response.reason)

        try:
            content = response.read()
        except TRANSPORT_ERRORS as e:
            self.logger.error(f"Docker API read error: {method} {url}: {e}")
            raise TransportError(f"Request failed: {e}") from e
        finally:
            conn.close()

        return DockerResponse(response.status, response.headers, content=content,
                              reason=response.reason)

    def _raise_for_status(self, method: str, url: str, conn, response):
        try:
            error_body = response.read()
        except TRANSPORT_ERRORS:
            error_body = b''
        finally:
            conn.close()

        message = extract_error_message(error_body, response.reason)
        status = response.status
        error_response = DockerResponse(status, response.headers, content=error_body,
                                        reason=response.reason)

        if status >= 500:
            self.logger.error(f"Docker API server error: {method} {url}: {status} {message}")
            raise ServerError(message, status_code=status, response=error_response)

        self.logger.error(f"Docker API client error: {method} {url}: {status} {message}")
        if status == 404:
            raise NotFound(message, status_code=status, response=error_response)
        if status == 409:
            raise Conflict(message, status_code=status, response=error_response)
        raise ClientError(message, status_code=status, response=error_response)

    def get(self, path: str, **kwargs) -> DockerResponse:
        """Make GET request"""
        return self.request('GET', path, **kwargs)

    def post(self, path: str, **kwargs) -> DockerResponse:
        """Make POST request"""
        return self.request('POST', path, **kwargs)

    def put(self, path: str, **kwargs) -> DockerResponse:
        """Make PUT request"""
        return self.request('PUT', path, **kwargs)

    def delete(self, path: str, **kwargs) -> DockerResponse:
        """Make DELETE request"""
        return self.request('DELETE', path, **kwargs)

    def head(self, path: str, **kwargs) -> DockerResponse:
        """Make HEAD request"""
        return self.request('HEAD', path, **kwargs)

    def get_json_response(self, response: DockerResponse) -> Any:
        """
        Decode a JSON body

        Returns:
            Decoded value, {} for an empty body
        """
        content = response.content
        if not content or not content.strip():
            return {}
        try:
            return json.loads(content.decode('utf-8'))
        except ValueError as e:
            raise TransportError(f"Invalid JSON response: {e}", status_code=response.status,
                                 response=response) from e

    def get_string_response(self, response: DockerResponse) -> str:
        return response.text

    def get_stream_response(self, response: DockerResponse) -> DockerStream:
        return response.stream()


def extract_error_message(body: bytes, fallback: str = '') -> str:
    """Daemon's JSON 'message' field, else the raw body, else fallback"""
    text = body.decode('utf-8', errors='replace').strip() if body else ''
    if text:
        try:
            decoded = json.loads(text)
        except ValueError:
            return text
        if isinstance(decoded, dict) and decoded.get('message'):
            return str(decoded['message'])
        return text
    return fallback or 'Docker API request failed'


def _redact(headers: Dict[str, str]) -> Dict[str, str]:
    return {k: ('<redacted>' if k.lower() == 'x-registry-auth' else v) for k, v in headers.items()}
