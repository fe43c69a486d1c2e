from .app import App
from .finalizer import create_final_handler
from .request import Request
from .response import Response
from .http import HTTPStatus, HTTPError

__all__ = [
    'App', 'Request', 'Response', 'HTTPStatus', 'HTTPError',
    'create_final_handler']
