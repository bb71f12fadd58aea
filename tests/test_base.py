import base64
import json

import pytest

from docker_engine_api.base import (
    BaseClient,
    binary_body,
    build_query,
    encode_filters,
    encode_registry_auth,
    form_body,
    json_body,
    multipart_body,
    path_param,
)
from docker_engine_api.exceptions import InvalidParameter
from docker_engine_api.http_client import DockerResponse


def test_build_query_empty():
    assert build_query({}) == ''
    assert build_query({'a': None, 'b': ''}) == ''


def test_build_query_keeps_order_and_drops_nulls():
    assert build_query({'a': 1, 'b': None, 'c': 'x'}) == '?a=1&c=x'
    assert build_query({'z': 1, 'a': 2}) == '?z=1&a=2'


def test_build_query_value_encoding():
    query = build_query({'all': True, 'size': False, 'limit': 0})
    assert query == '?all=true&size=false&limit=0'

    query = build_query({'buildargs': {'A': 'b'}})
    assert query == '?buildargs=%7B%22A%22%3A+%22b%22%7D'

    query = build_query({'path': '/etc/hosts'})
    assert query == '?path=%2Fetc%2Fhosts'


def test_encode_filters_normalises_values():
    assert encode_filters(None) is None
    assert encode_filters({}) is None
    assert encode_filters({'a': None}) is None

    encoded = json.loads(encode_filters({
        'status': 'running',
        'label': ['a=b', 'c'],
        'dangling': True,
        'reference': {'nginx': True},
    }))
    assert encoded == {
        'status': ['running'],
        'label': ['a=b', 'c'],
        'dangling': ['true'],
        'reference': {'nginx': True},
    }


def test_encode_registry_auth():
    auth = {'username': 'u', 'password': 'p?>', 'serveraddress': 'registry.example.com'}
    encoded = encode_registry_auth(auth)

    assert '+' not in encoded and '/' not in encoded
    assert json.loads(base64.urlsafe_b64decode(encoded)) == auth

    assert encode_registry_auth('already-encoded') == 'already-encoded'

    with pytest.raises(InvalidParameter):
        encode_registry_auth(42)

    with pytest.raises(InvalidParameter):
        encode_registry_auth('')


def test_path_param():
    assert path_param('nginx:latest') == 'nginx:latest'
    assert path_param('registry.example.com:5000/team/app') == 'registry.example.com:5000/team/app'
    assert path_param('a b') == 'a%20b'


def test_bodies():
    body = json_body({'Image': 'alpine'})
    assert body.content_type == 'application/json'
    assert json.loads(body.content) == {'Image': 'alpine'}

    body = form_body({'a': 1, 'b': None, 'c': True})
    assert body.content == b'a=1&c=true'
    assert body.content_type == 'application/x-www-form-urlencoded'

    body = binary_body(b'\x00\x01', 'application/x-tar')
    assert body.content == b'\x00\x01'
    assert len(body) == 2

    assert binary_body('text').content == b'text'


def test_multipart_body():
    body = multipart_body([
        {'name': 'field', 'contents': 'value'},
        {'name': 'file', 'contents': b'data', 'filename': 'a.txt', 'content_type': 'text/plain'},
    ], boundary='XYZ')

    assert body.content_type == 'multipart/form-data; boundary=XYZ'
    assert body.content == (
        b'--XYZ\r\n'
        b'Content-Disposition: form-data; name="field"\r\n'
        b'\r\n'
        b'value\r\n'
        b'--XYZ\r\n'
        b'Content-Disposition: form-data; name="file"; filename="a.txt"\r\n'
        b'Content-Type: text/plain\r\n'
        b'\r\n'
        b'data\r\n'
        b'--XYZ--\r\n'
    )

    with pytest.raises(InvalidParameter):
        multipart_body([{'name': 'missing-contents'}])


def test_base_client_helpers(recorder):
    client = BaseClient(recorder)

    assert client.registry_auth_headers(None) == {}
    assert list(client.registry_auth_headers({'username': 'u'})) == ['X-Registry-Auth']

    assert client.get_json_response(DockerResponse(200, None, content=b'')) == {}
    assert client.get_json_response(DockerResponse(200, None, content=b'[1]')) == [1]
    assert client.get_string_response(DockerResponse(200, None, content=b'OK')) == 'OK'
    assert client.get_stream_response(DockerResponse(200, None, content=b'abc')).read() == b'abc'

    assert client.is_successful(DockerResponse(204, None))
    assert not client.is_successful(DockerResponse(304, None))
