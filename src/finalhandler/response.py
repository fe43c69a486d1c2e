from finalhandler.http import HTTPStatus, status_message


class Response:
    """An outgoing response, written to the client socket.

    The head (status line and headers) is sent with the first `write`
    or with `end`. After that, `headers_sent` is True and the status and
    headers can no longer change. Without an explicit Content-Length,
    `write` switches the response to chunked transfer encoding.
    """

    __slots__ = (
        '_chunked', '_headers', 'finished', 'headers_sent',
        'keep_alive', 'socket', 'status', 'status_message')

    def __init__(self, socket, status=HTTPStatus.OK, keep_alive=True):
        self._chunked = False
        self._headers = {}
        self.finished = False
        self.headers_sent = False
        self.keep_alive = keep_alive
        self.socket = socket
        self.status = status
        self.status_message = None

    @property
    def headers(self) -> dict:
        return dict(self._headers.values())

    def get_header(self, name: str, default=None):
        return self._headers.get(name.lower(), (name, default))[1]

    def has_header(self, name: str) -> bool:
        return name.lower() in self._headers

    def set_header(self, name: str, value):
        """Set a header, replacing any header of the same name.

        Raises ValueError when the name or value cannot be written
        as is in the response head, such as text holding a line break.
        """
        if self.headers_sent:
            raise RuntimeError(
                'Cannot set header {!r} after headers are sent.'.format(name))
        try:
            text = str(value)
        except Exception as exc:
            raise ValueError(
                'Header {!r} has no text value.'.format(name)) from exc
        for part in (name, text):
            if '\r' in part or '\n' in part:
                raise ValueError(
                    'Invalid character in header {!r}.'.format(name))
            try:
                part.encode('latin-1')
            except UnicodeEncodeError:
                raise ValueError(
                    'Header {!r} is not latin-1 encodable.'.format(name))
        self._headers[name.lower()] = (name, value)

    def remove_header(self, name: str):
        self._headers.pop(name.lower(), None)

    def head(self) -> bytes:
        status = int(self.status)
        phrase = self.status_message or status_message(status) or str(status)
        response = b'HTTP/1.1 %i %b\r\n' % (status, phrase.encode())

        if not self.keep_alive and not self.has_header('Connection'):
            self.set_header('Connection', 'close')

        # https://tools.ietf.org/html/rfc7230#section-3.3.2 :scream:
        for key, value in self._headers.values():
            response += b'%b: %b\r\n' % (
                key.encode('latin-1'), str(value).encode('latin-1'))
        return response + b'\r\n'

    async def write(self, data):
        if isinstance(data, str):
            data = data.encode()
        if not self.headers_sent:
            if not self.has_header('Content-Length'):
                self._chunked = True
                self.set_header('Transfer-Encoding', 'chunked')
            await self.socket.sendall(self.head())
            self.headers_sent = True
        if not data:
            return
        if self._chunked:
            await self.socket.sendall(b"%x\r\n%b\r\n" % (len(data), data))
        else:
            await self.socket.sendall(data)

    async def end(self, data=b''):
        if self.finished:
            return
        if isinstance(data, str):
            data = data.encode()
        if not self.headers_sent:
            if not self.has_header('Content-Length'):
                self.set_header('Content-Length', len(data))
            head = self.head()
            self.headers_sent = True
            await self.socket.sendall(head + data)
        else:
            if data:
                await self.write(data)
            if self._chunked:
                await self.socket.sendall(b'0\r\n\r\n')
        self.finished = True
