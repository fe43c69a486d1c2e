import pytest
from http import HTTPStatus
from finalhandler.response import Response
from finalhandler.testing import MockSocket


pytestmark = pytest.mark.curio


def test_headers_are_case_insensitive():
    response = Response(None)
    response.set_header('content-type', 'text/plain')
    response.set_header('Content-Type', 'text/html')
    assert response.headers == {'Content-Type': 'text/html'}
    assert response.get_header('CONTENT-TYPE') == 'text/html'
    assert response.has_header('content-type')
    response.remove_header('CONTENT-type')
    assert response.headers == {}
    assert response.get_header('Content-Type', 'missing') == 'missing'


def test_head():
    response = Response(None, HTTPStatus.ACCEPTED)
    response.set_header('Custom-Header', 'Test')
    assert response.head() == (
        b'HTTP/1.1 202 Accepted\r\n'
        b'Custom-Header: Test\r\n\r\n')


def test_head_status_message():
    response = Response(None)
    response.status = 599
    assert response.head() == b'HTTP/1.1 599 599\r\n\r\n'
    response.status_message = 'Oops'
    assert response.head() == b'HTTP/1.1 599 Oops\r\n\r\n'


def test_head_closing_connection():
    response = Response(None, keep_alive=False)
    assert response.head() == (
        b'HTTP/1.1 200 OK\r\n'
        b'Connection: close\r\n\r\n')


async def test_end():
    socket = MockSocket()
    response = Response(socket)
    response.set_header('Content-Type', 'text/plain; charset=utf-8')
    await response.end('Super')
    assert socket.sent == (
        b'HTTP/1.1 200 OK\r\n'
        b'Content-Type: text/plain; charset=utf-8\r\n'
        b'Content-Length: 5\r\n\r\n'
        b'Super')
    assert response.headers_sent is True
    assert response.finished is True


async def test_end_is_idempotent():
    socket = MockSocket()
    response = Response(socket)
    await response.end()
    await response.end(b'More')
    assert socket.sent == (
        b'HTTP/1.1 200 OK\r\n'
        b'Content-Length: 0\r\n\r\n')


async def test_end_keeps_content_length():
    socket = MockSocket()
    response = Response(socket)
    response.set_header('Content-Length', 42)
    await response.end()
    assert socket.sent == (
        b'HTTP/1.1 200 OK\r\n'
        b'Content-Length: 42\r\n\r\n')


async def test_chunked_write():
    socket = MockSocket()
    response = Response(socket)
    for chunk in [b'This', b'is', b'a', 'chunked', b'body']:
        await response.write(chunk)
    assert response.headers_sent is True
    assert response.finished is False
    await response.end()
    assert socket.sent == (
        b'HTTP/1.1 200 OK\r\n'
        b'Transfer-Encoding: chunked\r\n\r\n'
        b'4\r\nThis\r\n'
        b'2\r\nis\r\n'
        b'1\r\na\r\n'
        b'7\r\nchunked\r\n'
        b'4\r\nbody\r\n'
        b'0\r\n\r\n'
    )


async def test_write_with_length():
    socket = MockSocket()
    response = Response(socket)
    response.set_header('Content-Length', 5)
    await response.write(b'Sup')
    await response.end(b'er')
    assert socket.sent == (
        b'HTTP/1.1 200 OK\r\n'
        b'Content-Length: 5\r\n\r\n'
        b'Super')


async def test_headers_frozen_once_sent():
    response = Response(MockSocket())
    await response.write(b'')
    with pytest.raises(RuntimeError):
        response.set_header('X-Late', 'yes')


@pytest.mark.parametrize('name, value', [
    ('X-Split', 'a\r\nSet-Cookie: evil=1'),
    ('X-Split', 'a\nb'),
    ('X-Bad\r\nName', 'a'),
    ('X-Euro', '€'),
    ('X-€', 'a'),
])
def test_invalid_header_rejected(name, value):
    response = Response(None)
    with pytest.raises(ValueError):
        response.set_header(name, value)
    assert response.headers == {}


def test_latin1_header_accepted():
    response = Response(None)
    response.set_header('X-Name', 'Zoë')
    assert response.head() == (
        b'HTTP/1.1 200 OK\r\n'
        b'X-Name: Zo\xeb\r\n\r\n')
