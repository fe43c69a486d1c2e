import socket
from curio.io import Socket
from finalhandler.request import Channel
from finalhandler.response import Response
from finalhandler.http import HTTPError
from typing import Callable


async def request_handler(app: Callable, client: Socket, *args):
    async with client:
        try:
            async for request in Channel(client):
                response = Response(client, keep_alive=request.keep_alive)
                await app(request, response)
                if not response.finished:
                    # The application gave up on the response.
                    break
        except HTTPError as exc:
            await client.sendall(bytes(exc))
        except (ConnectionResetError, BrokenPipeError, socket.timeout):
            # The client disconnected or the network is suddenly
            # unreachable.
            pass
