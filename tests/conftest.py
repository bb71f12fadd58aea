import http.client
import json
import os
import shutil
import socketserver
import tempfile
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

import pytest

from docker_engine_api import DockerClient
from docker_engine_api.config import ClientConfig
from docker_engine_api.http_client import DockerHTTPClient, DockerResponse


def make_headers(headers=None):
    message = http.client.HTTPMessage()
    for key, value in (headers or {}).items():
        message[key] = value
    return message


def encode(body):
    if isinstance(body, bytes):
        return body
    return json.dumps(body).encode('utf-8')


class RecordedRequest:

    def __init__(self, method, path, body, headers, stream):
        self.method = method
        self.path = path
        self.body = body
        self.headers = headers
        self.stream = stream

    @property
    def route(self):
        return self.path.partition('?')[0]

    @property
    def query(self):
        return {k: v[0] for k, v in parse_qs(urlsplit(self.path).query,
                                            keep_blank_values=True).items()}

    @property
    def json(self):
        return json.loads(self.body.content.decode('utf-8'))


class RecordingHTTPClient(DockerHTTPClient):
    """Transport that records requests and replays queued responses"""

    def __init__(self):
        super().__init__(ClientConfig('http://docker.test:2375'))
        self.requests = []
        self.responses = []

    def queue(self, body=b'', status=200, headers=None):
        self.responses.append(DockerResponse(status, make_headers(headers), content=encode(body)))

    def request(self, method, path, body=None, headers=None, stream=False):
        self.requests.append(RecordedRequest(method, path, body, headers or {}, stream))
        if self.responses:
            return self.responses.pop(0)
        return DockerResponse(200, make_headers(), content=b'')

    @property
    def last(self):
        return self.requests[-1]


@pytest.fixture
def recorder():
    return RecordingHTTPClient()


@pytest.fixture
def docker(recorder):
    return DockerClient(http=recorder)


class FakeDaemon:
    """Routes and request log shared with the handler threads"""

    def __init__(self):
        self.routes = {}
        self.requests = []
        self.base_url = None

    def route(self, method, path, body=b'', status=200, headers=None):
        headers = dict(headers or {})
        if not isinstance(body, bytes):
            headers.setdefault('Content-Type', 'application/json')
        self.routes[(method, path)] = (status, headers, encode(body))


class DaemonHandler(BaseHTTPRequestHandler):

    def handle_request(self):
        state = self.server.state
        length = int(self.headers.get('Content-Length') or 0)
        body = self.rfile.read(length) if length else b''
        path = self.path.partition('?')[0]
        state.requests.append({
            'method': self.command,
            'path': self.path,
            'headers': dict(self.headers.items()),
            'body': body,
        })

        status, headers, payload = state.routes.get(
            (self.command, path),
            (404, {'Content-Type': 'application/json'}, b'{"message": "page not found"}'),
        )
        self.send_response(status)
        for key, value in headers.items():
            self.send_header(key, value)
        self.send_header('Content-Length', str(len(payload)))
        self.end_headers()
        if self.command != 'HEAD':
            self.wfile.write(payload)

    do_GET = handle_request
    do_POST = handle_request
    do_PUT = handle_request
    do_DELETE = handle_request
    do_HEAD = handle_request

    def log_message(self, format, *args):
        pass


class UnixHTTPServer(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
    daemon_threads = True


def _serve(server, state):
    server.state = state
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return thread


@pytest.fixture
def tcp_daemon():
    state = FakeDaemon()
    server = ThreadingHTTPServer(('127.0.0.1', 0), DaemonHandler)
    state.base_url = f'http://127.0.0.1:{server.server_address[1]}'
    _serve(server, state)

    yield state

    server.shutdown()
    server.server_close()


@pytest.fixture
def unix_daemon():
    directory = tempfile.mkdtemp(prefix='dea-')
    socket_path = os.path.join(directory, 'docker.sock')
    state = FakeDaemon()
    server = UnixHTTPServer(socket_path, DaemonHandler)
    state.base_url = f'unix://{socket_path}'
    _serve(server, state)

    yield state

    server.shutdown()
    server.server_close()
    shutil.rmtree(directory, ignore_errors=True)
