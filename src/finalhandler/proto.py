from abc import ABC, abstractmethod
from curio.io import Socket
from finalhandler.request import Request
from finalhandler.response import Response
from typing import Tuple, Callable, Optional


class Application(ABC):
    """Application abstraction.
    """

    @abstractmethod
    async def notify(self, event: str, *args):
        pass

    @abstractmethod
    def lookup(self, request: Request) -> Tuple[Optional[Callable], dict]:
        pass

    @abstractmethod
    async def __call__(self, request: Request, response: Response):
        pass

    @abstractmethod
    async def handle_request(self, client: Socket, addr: Tuple[str, int]):
        pass
