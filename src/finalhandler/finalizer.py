"""The last handler of a request.

`create_final_handler` returns the coroutine function an application
calls once nothing else will answer the request: either nothing matched
(404) or an error was raised. It responds with a small HTML document
and makes sure the request body is drained first, so that the
connection is not left stalled by bytes nobody reads.
"""
import inspect
import logging
import os
from enum import Enum
from typing import Callable, Optional
from urllib.parse import urlsplit

import curio

from finalhandler.encoding import create_html_document, encode_url
from finalhandler.errors import (
    StructuredError, classify, error_message, response_status_code)
from finalhandler.http import status_message


logger = logging.getLogger('finalhandler')

ENV_VARIABLE = 'APP_ENV'


def resource_name(request) -> str:
    """Original path of the request, or "resource" when unknown.
    """
    url = getattr(request, 'original_url', None) or \
        getattr(request, 'url', None)
    if isinstance(url, bytes):
        url = url.decode('utf-8', 'replace')
    if not url or not isinstance(url, str):
        return 'resource'
    try:
        path = urlsplit(url).path
    except ValueError:
        # Such as an unbalanced IPv6 bracket in the authority.
        return 'resource'
    return path or '/'


class DrainState(Enum):
    DRAINING = 'draining'
    READY = 'ready'


class Drain:
    """Holds the response back until the request stream is finished.
    """

    __slots__ = ('request', 'state', '_write')

    def __init__(self, request, write: Callable):
        self.request = request
        self._write = write
        if request.finished:
            self.state = DrainState.READY
        else:
            self.state = DrainState.DRAINING

    async def ready(self):
        self.state = DrainState.READY
        await self._write()

    async def run(self):
        if self.state is DrainState.READY:
            await self._write()
            return

        # Any downstream consumer loses the rest of the body.
        self.request.unpipe()
        self.request.on_finished(self.ready)
        await self.request.resume()


async def send_response(request, response, status: int,
                        headers: Optional[dict], message: str):

    async def write():
        body = create_html_document(message).encode('utf-8')

        response.status = status
        response.status_message = status_message(status) or str(status)

        if headers:
            for key, value in headers.items():
                try:
                    response.set_header(key, value)
                except ValueError as exc:
                    logger.debug('skipping error header: %s', exc)

        # security headers
        response.set_header('Content-Security-Policy', "default-src 'none'")
        response.set_header('X-Content-Type-Options', 'nosniff')

        # standard headers
        response.set_header('Content-Type', 'text/html; charset=utf-8')
        response.set_header('Content-Length', len(body))

        if request.method == 'HEAD':
            await response.end()
        else:
            await response.end(body)

    await Drain(request, write).run()


async def deferred(callback: Callable, *args):
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


def create_final_handler(request, response, *, env: str=None,
                         onerror: Callable=None, app=None):
    """Create the coroutine function answering a request for good.

    :param env: "production" hides error details from the client.
      Defaults to the APP_ENV environment variable, else "development".
    :param onerror: called with `(error, request, response)` in a
      separate task whenever an error is handled.
    :param app: notified of every dispatch with an `errorDispatch`
      event, when it has a `notify` coroutine method.
    """
    if env is None:
        env = os.environ.get(ENV_VARIABLE) or 'development'

    async def finish(error=None):
        if response.headers_sent:
            # Cannot actually respond.
            logger.debug('cannot %s after headers sent',
                         'error' if error is not None else 'not found')
            await response.end(b'')
            return

        url = encode_url(resource_name(request))
        headers = None
        if error is not None:
            kind = classify(error)
            if isinstance(kind, StructuredError):
                status = kind.status
                headers = kind.headers
            else:
                status = response_status_code(response)
            message = error_message(kind, status, env)
        else:
            status = 404
            message = 'Cannot {} {}'.format(request.method, url)

        logger.debug('error dispatching %s %s', request.method, url)
        notify = getattr(app, 'notify', None)
        if callable(notify):
            await notify('errorDispatch', {
                'method': request.method,
                'url': url,
            })
        logger.debug('default %s', status)

        if error is not None and onerror is not None:
            await curio.spawn(
                deferred, onerror, error, request, response, daemon=True)

        await send_response(request, response, status, headers, message)

    return finish
