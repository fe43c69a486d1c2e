from http import HTTPStatus
from typing import Optional, Union


HTTPCode = Union[HTTPStatus, int]


# Registered phrases that the stdlib enum does not carry.
EXTRA_PHRASES = {
    509: 'Bandwidth Limit Exceeded',
}


def status_message(code: int) -> Optional[str]:
    """Reason phrase for `code`, or None when none is registered."""
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return EXTRA_PHRASES.get(code)


class HTTPError(Exception):
    """An error carrying an HTTP status and optional response headers.
    """

    def __init__(self, code: HTTPCode, message: str=None,
                 headers: dict=None):
        self.status = HTTPStatus(code)
        self.message = message or self.status.phrase
        self.headers = headers
        super().__init__(self.message)

    def __bytes__(self):
        body = self.message.encode()
        response = b'HTTP/1.1 %i %b\r\n' % (
            self.status.value, self.status.phrase.encode())
        if self.headers:
            for key, value in self.headers.items():
                response += b'%b: %b\r\n' % (
                    key.encode(), str(value).encode())
        response += b'Content-Type: text/plain; charset=utf-8\r\n'
        response += b'Content-Length: %i\r\n' % len(body)
        response += b'Connection: close\r\n\r\n'
        return response + body
