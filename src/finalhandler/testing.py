import http.client
from contextlib import asynccontextmanager

import pytest
import curio

from finalhandler.app import App
from finalhandler.request import Channel
from finalhandler.server import Server


class MockSocket:
    """Mock socket replaying `incoming` and recording what is sent.

    Each element of `incoming` is returned by one `recv` call. Once they
    are exhausted, `recv` behaves like a closed connection.
    """

    def __init__(self, *incoming: bytes):
        self.incoming = list(incoming)
        self.sent = b''
        self.reads = 0

    async def recv(self, maxsize: int) -> bytes:
        self.reads += 1
        if self.incoming:
            return self.incoming.pop(0)
        return b''

    async def sendall(self, data: bytes):
        self.sent += data

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


def split_response(raw: bytes):
    """Status line, headers and body of a raw, non-chunked response.
    """
    head, _, body = raw.partition(b'\r\n\r\n')
    lines = head.decode('latin-1').split('\r\n')
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(': ')
        headers[name] = value
    return lines[0], headers, body


def forge_request(data: bytes, *body: bytes):
    """Parse `data` until the request head is complete.

    Chunks in `body` remain on the mocked socket, unread.
    """
    channel = Channel(MockSocket(*body))
    channel.data_received(data)
    return channel.request


class RequestForger:

    @classmethod
    def forge(cls, method, path, body=b'', headers=None):
        headers = headers or {}
        if isinstance(body, str):
            body = body.encode()
        if body and 'Content-Length' not in headers:
            headers['Content-Length'] = len(body)
        headers.setdefault('Host', 'localhost')
        headers = '\r\n'.join('{}: {}'.format(*h) for h in headers.items())
        data = b'%b %b HTTP/1.1\r\n%b\r\n\r\n%b' % (
            method.encode(), path.encode(), headers.encode(), body or b'')
        return data

    @classmethod
    def get(cls, path, headers=None):
        return cls.forge('GET', path, headers=headers)


class LiveClient:

    task = None

    def __init__(self, server: Server, app: App):
        self.app = app
        self.server = server

    async def __aenter__(self):
        # The server socket is already listening.
        self.task = await curio.spawn(self.server.run, self.app)

    async def __aexit__(self, *args, **kwargs):
        await self.task.cancel()
        self.task = None

    @asynccontextmanager
    async def query(self, method, uri, headers: dict=None, body=None):

        conn = http.client.HTTPConnection(*self.server.sockaddr)

        def execute(method, uri, headers, body):
            if headers is None:
                headers = {}

            conn.request(method, uri, headers=headers, body=body)
            response = conn.getresponse()
            # Read while the connection is open.
            response.data = response.read()
            return response

        yield await curio.run_in_thread(execute, method, uri, headers, body)
        conn.close()


@pytest.fixture
def app():
    return App()


@pytest.fixture
def server():
    # Testing locally on a free port.
    return Server('', 0)


@pytest.fixture
def client(server, app):
    return LiveClient(server, app)
