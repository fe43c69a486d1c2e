from collections import defaultdict
from typing import Callable

from autoroutes import Routes

from finalhandler.finalizer import create_final_handler
from finalhandler.handler import request_handler
from finalhandler.http import HTTPStatus, HTTPError
from finalhandler.lifecycle import handler_events
from finalhandler.proto import Application
from finalhandler.request import Request
from finalhandler.response import Response
from finalhandler.server import Server


class App(Application, dict):
    """A minimal router answering through the final handler.

    Handlers are coroutine functions receiving the request, the response
    and the route parameters. A handler that returns without ending the
    response passes the request on, which ends in a 404. Exceptions
    raised by handlers become error responses.
    """

    __slots__ = ('env', 'hooks', 'onerror', 'routes')

    handle_request = request_handler

    def __init__(self, env: str=None, onerror: Callable=None):
        self.env = env
        self.hooks = defaultdict(list)
        self.onerror = onerror
        self.routes = Routes()

    def lookup(self, request: Request):
        payload, params = self.routes.match(request.path or '')

        if not payload:
            return None, {}

        # Uppercased in order to only consider HTTP verbs.
        handler = payload.get(request.method.upper(), None)
        if handler is None:
            raise HTTPError(HTTPStatus.METHOD_NOT_ALLOWED)

        return handler, params

    @handler_events
    async def __call__(self, request: Request, response: Response):
        done = create_final_handler(
            request, response, env=self.env, onerror=self.onerror, app=self)
        try:
            handler, params = self.lookup(request)
            if handler is not None:
                await handler(request, response, **params)
        except Exception as exc:
            await done(exc)
        else:
            if not response.finished:
                await done()

    def route(self, path: str, methods: list=None, **extras: dict):
        if methods is None:
            methods = ['GET']

        def wrapper(func):
            payload = {method: func for method in methods}
            payload.update(extras)
            self.routes.add(path, **payload)
            return func

        return wrapper

    def listen(self, name: str):
        def wrapper(func):
            self.hooks[name].append(func)
            return func
        return wrapper

    async def notify(self, name: str, *args, **kwargs):
        if name in self.hooks:
            for hook in self.hooks[name]:
                result = await hook(*args, **kwargs)
                if result is not None:
                    # Allows to shortcut the chain.
                    return result
        return None

    def start(self, host='127.0.0.1', port=5000, debug=True):
        Server.start(self, host, port, debug)
