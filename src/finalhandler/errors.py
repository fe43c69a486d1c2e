"""Normalization of arbitrary error values.

Anything can be handed to the final handler as an error: exceptions,
strings, mappings, objects that refuse to be converted to text.
`classify` reduces such a value to one of three shapes so the rest of
the final handler never has to inspect it again.
"""
import traceback
from collections.abc import Mapping
from typing import NamedTuple, Optional, Union

from finalhandler.http import status_message


# Looked up in this order. The first valid one wins.
STATUS_FIELDS = ('status', 'status_code')


class StructuredError(NamedTuple):
    status: int
    headers: Optional[dict] = None
    detail: Optional[str] = None


class PlainError(NamedTuple):
    detail: str


class UnknownError(NamedTuple):
    detail: Optional[str] = None


ErrorKind = Union[StructuredError, PlainError, UnknownError]


def _field(error, name: str):
    try:
        if isinstance(error, Mapping):
            return error.get(name)
        return getattr(error, name, None)
    except Exception:
        return None


def is_error_status(value) -> bool:
    return (isinstance(value, int) and not isinstance(value, bool)
            and 400 <= value < 600)


def error_status_code(error) -> Optional[int]:
    for name in STATUS_FIELDS:
        value = _field(error, name)
        if is_error_status(value):
            return int(value)
    return None


def error_headers(error) -> Optional[dict]:
    headers = _field(error, 'headers')
    if not isinstance(headers, Mapping):
        return None
    return {str(key): value for key, value in headers.items()}


def error_detail(error) -> Optional[str]:
    """Most descriptive text available for the error.

    Exceptions render as their formatted traceback, which ends with
    the exception's own message. Other values are converted with
    `str`. Returns None when the value cannot be rendered.
    """
    try:
        if isinstance(error, BaseException):
            detail = ''.join(traceback.format_exception(
                type(error), error, error.__traceback__))
            return detail.rstrip('\n') or None
        return str(error) or None
    except Exception:
        return None


def classify(error) -> ErrorKind:
    detail = error_detail(error)
    status = error_status_code(error)
    if status is not None:
        return StructuredError(status, error_headers(error), detail)
    if detail:
        return PlainError(detail)
    return UnknownError()


def response_status_code(response) -> int:
    status = getattr(response, 'status', None)
    if not isinstance(status, int) or isinstance(status, bool) \
       or status < 400 or status > 599:
        return 500
    return int(status)


def error_message(kind: ErrorKind, status: int, env: str) -> str:
    message = None
    if env != 'production':
        message = kind.detail
    return message or status_message(status) or str(status)
