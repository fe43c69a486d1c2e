import logging
from collections import deque
from typing import Callable
from urllib.parse import unquote, urlsplit

import curio
from finalhandler.http import HTTPStatus, HTTPError
from httptools import HttpParserUpgrade, HttpParserError, HttpRequestParser
from httptools.parser.errors import HttpParserInvalidMethodError


logger = logging.getLogger('finalhandler')


class Channel:

    __slots__ = (
        'parser',
        'request',
        'requests',
        'socket',
    )

    def __init__(self, socket):
        self.parser = HttpRequestParser(self)
        self.request = None
        # Requests whose head is parsed, in arrival order.
        self.requests = deque()
        self.socket = socket

    @property
    def complete(self) -> bool:
        return self.request is not None and self.request.complete

    def data_received(self, data: bytes):
        try:
            self.parser.feed_data(data)
        except HttpParserUpgrade:
            raise HTTPError(
                HTTPStatus.NOT_IMPLEMENTED, 'Protocol upgrade unsupported.')
        except (HttpParserError, HttpParserInvalidMethodError):
            raise HTTPError(
                HTTPStatus.BAD_REQUEST, 'Unparsable request.')

    async def read(self, parse: bool=True) -> bytes:
        data = await self.socket.recv(4096)
        if data:
            if parse:
                self.data_received(data)
            return data
        return None

    def on_header(self, name: bytes, value: bytes):
        value = value.decode()
        if value:
            name = name.decode().title()
            if name in self.request.headers:
                self.request.headers[name] += ', {}'.format(value)
            else:
                self.request.headers[name] = value

    def on_body(self, data: bytes):
        self.request.feed(data)

    def on_message_begin(self):
        self.request = Request(self.socket, self)

    def on_message_complete(self):
        self.request.complete = True

    def on_url(self, url: bytes):
        self.request.url = url
        path = urlsplit(url.decode('utf-8', 'replace')).path
        self.request.path = unquote(path)

    def on_headers_complete(self):
        self.request.keep_alive = self.parser.should_keep_alive()
        self.request.method = self.parser.get_method().decode().upper()
        self.requests.append(self.request)

    async def __aiter__(self):
        while True:
            if not self.requests:
                data = await self.read()
                if data is None:
                    break
                continue
            request = self.requests.popleft()
            yield request
            if not request.keep_alive:
                break
            # Whatever the application left unread is discarded
            # before the next request can be parsed. Draining may
            # parse pipelined requests: they wait in `requests`.
            await request.resume()
            if not request.keep_alive or request.closed:
                break


class Request(dict):
    """An incoming request whose body is a readable stream.

    The body is pulled from the channel on demand. It can be read by the
    application, piped to a writable destination or drained with
    `resume`. The request is `finished` once the whole body was received
    (or the client went away) and every buffered chunk was consumed.
    """

    __slots__ = (
        '_chunks',
        '_finished_listeners',
        '_lock',
        '_pipes',
        'channel',
        'closed',
        'complete',
        'headers',
        'keep_alive',
        'method',
        'original_url',
        'path',
        'socket',
        'url'
    )

    def __init__(self, socket, channel, **headers):
        self._chunks = deque()
        self._finished_listeners = []
        self._lock = curio.Lock()
        self._pipes = []
        self.channel = channel
        self.closed = False
        self.complete = False
        self.headers = headers
        self.keep_alive = False
        self.method = None
        self.original_url = None
        self.path = None
        self.socket = socket
        self.url = None

    @property
    def finished(self) -> bool:
        return (self.complete or self.closed) and not self._chunks

    def feed(self, data: bytes):
        self._chunks.append(data)

    def on_finished(self, listener: Callable):
        """Register a coroutine function run once the body is consumed.
        """
        self._finished_listeners.append(listener)

    async def _notify_finished(self):
        listeners, self._finished_listeners = self._finished_listeners, []
        for listener in listeners:
            await listener()

    async def _pull(self) -> bytes:
        async with self._lock:
            while not self._chunks and not (self.complete or self.closed):
                if self.channel is None:
                    self.closed = True
                    break
                try:
                    data = await self.channel.read()
                except HTTPError as exc:
                    logger.warning('Dropping request body: %s', exc.message)
                    self.closed = True
                    self.keep_alive = False
                    break
                if data is None:
                    self.closed = True
                    self.keep_alive = False
            chunk = self._chunks.popleft() if self._chunks else None
            if self.finished:
                # Listeners run under the lock: concurrent readers wait
                # until the notification is over.
                await self._notify_finished()
        return chunk

    async def stream(self):
        while True:
            chunk = await self._pull()
            if chunk is None:
                break
            yield chunk

    async def read(self) -> bytes:
        body = b''
        async for data in self.stream():
            body += data
        return body

    async def pipe(self, destination):
        """Forward the body to `destination.write` until unpiped.
        """
        self._pipes.append(destination)
        try:
            while destination in self._pipes:
                chunk = await self._pull()
                if chunk is None:
                    break
                if destination in self._pipes:
                    await destination.write(chunk)
        finally:
            self.unpipe(destination)

    def unpipe(self, destination=None):
        if destination is None:
            self._pipes.clear()
        elif destination in self._pipes:
            self._pipes.remove(destination)

    async def resume(self):
        """Discard the rest of the body, then notify finished listeners.
        """
        while not self.finished:
            await self._pull()
        async with self._lock:
            await self._notify_finished()
