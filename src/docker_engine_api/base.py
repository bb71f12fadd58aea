"""
Base request builder shared by all resource clients
"""

import base64
import json
import uuid
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote, urlencode

from .exceptions import InvalidParameter
from .http_client import DockerHTTPClient, DockerResponse, DockerStream


class RequestBody:
    """Encoded request payload and its content type"""

    def __init__(self, content: bytes, content_type: str):
        self.content = content
        self.content_type = content_type

    def __len__(self):
        return len(self.content)

    def __repr__(self):
        return f"<RequestBody {self.content_type} ({len(self.content)} bytes)>"


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, dict, tuple)):
        return json.dumps(value)
    return str(value)


def build_query(params: Dict[str, Any]) -> str:
    """
    Build a query string

    None and '' values are dropped; booleans become 'true'/'false'; lists and
    dicts are JSON encoded. Order of the mapping is kept.

    Returns:
        '' when nothing is left, otherwise '?k=v&...'
    """
    pairs = [(key, _query_value(value)) for key, value in params.items()
             if value is not None and value != '']
    if not pairs:
        return ''
    return '?' + urlencode(pairs)


def encode_filters(filters: Optional[Dict[str, Any]]) -> Optional[str]:
    """
    JSON-encode filters in Docker's {key: [values]} shape

    Returns:
        JSON text, or None when there is nothing to filter on
    """
    if not filters:
        return None

    normalized = {}
    for key, value in filters.items():
        if value is None:
            continue
        if isinstance(value, dict):
            normalized[key] = value
        elif isinstance(value, (list, tuple)):
            normalized[key] = [_query_value(v) for v in value]
        else:
            normalized[key] = [_query_value(value)]
    return json.dumps(normalized) if normalized else None


def encode_registry_auth(auth: Any) -> str:
    """
    Value of the X-Registry-Auth header

    Args:
        auth: Auth mapping (username, password, serveraddress, ...) or an
              already encoded string

    Returns:
        base64url(JSON) of the mapping, or the string unchanged
    """
    if isinstance(auth, dict):
        return base64.urlsafe_b64encode(json.dumps(auth).encode('utf-8')).decode('ascii')
    if isinstance(auth, str) and auth:
        return auth
    raise InvalidParameter("Registry auth must be a mapping or an encoded string")


def path_param(value: Any) -> str:
    """Quote a value for use inside a URL path"""
    return quote(str(value), safe='/:@')


def json_body(data: Any) -> RequestBody:
    """Wrap data as application/json"""
    return RequestBody(json.dumps(data).encode('utf-8'), 'application/json')


def form_body(data: Dict[str, Any]) -> RequestBody:
    """Wrap data as application/x-www-form-urlencoded"""
    pairs = [(key, _query_value(value)) for key, value in data.items() if value is not None]
    return RequestBody(urlencode(pairs).encode('ascii'), 'application/x-www-form-urlencoded')


def multipart_body(parts: Iterable[Dict[str, Any]], boundary: Optional[str] = None) -> RequestBody:
    """
    Wrap parts as multipart/form-data

    Args:
        parts: Dicts with 'name' and 'contents', optional 'filename' and 'content_type'
        boundary: Boundary string (default: random)
    """
    boundary = boundary or uuid.uuid4().hex
    lines: List[bytes] = []
    for part in parts:
        if 'name' not in part or 'contents' not in part:
            raise InvalidParameter("Multipart parts need 'name' and 'contents'")

        disposition = f'form-data; name="{part["name"]}"'
        if part.get('filename'):
            disposition += f'; filename="{part["filename"]}"'

        contents = part['contents']
        if isinstance(contents, str):
            contents = contents.encode('utf-8')

        lines.append(f'--{boundary}'.encode('ascii'))
        lines.append(f'Content-Disposition: {disposition}'.encode('utf-8'))
        if part.get('content_type'):
            lines.append(f'Content-Type: {part["content_type"]}'.encode('ascii'))
        lines.append(b'')
        lines.append(contents)
    lines.append(f'--{boundary}--'.encode('ascii'))
    lines.append(b'')

    return RequestBody(b'\r\n'.join(lines), f'multipart/form-data; boundary={boundary}')


def binary_body(data: bytes, content_type: str = 'application/octet-stream') -> RequestBody:
    """Wrap raw bytes (tar archives and the like)"""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return RequestBody(bytes(data), content_type)


class BaseClient:
    """Base class for all resource clients"""

    def __init__(self, http: DockerHTTPClient):
        self.http = http

    build_query = staticmethod(build_query)
    encode_filters = staticmethod(encode_filters)
    json_body = staticmethod(json_body)
    form_body = staticmethod(form_body)
    multipart_body = staticmethod(multipart_body)
    binary_body = staticmethod(binary_body)

    def registry_auth_headers(self, auth: Any) -> Dict[str, str]:
        """X-Registry-Auth header for registry-facing endpoints"""
        if auth is None:
            return {}
        return {'X-Registry-Auth': encode_registry_auth(auth)}

    def get_json_response(self, response: DockerResponse) -> Any:
        return self.http.get_json_response(response)

    def get_string_response(self, response: DockerResponse) -> str:
        return self.http.get_string_response(response)

    def get_stream_response(self, response: DockerResponse) -> DockerStream:
        return self.http.get_stream_response(response)

    @staticmethod
    def is_successful(response: DockerResponse) -> bool:
        return 200 <= response.status < 300
