"""
Service outcomes and their mapping to HTTP status codes.

Services never raise for invalid input or missing records. They return
either ``Ok(value)`` or ``Err(kind, message)``; only the HTTP layer turns an
``Err`` into a status code, using ``STATUS_BY_KIND``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

from fastapi import status

T = TypeVar("T")


class ErrorKind(str, Enum):
    DUPLICATE_USERNAME = "DuplicateUsername"
    INVALID_USERNAME = "InvalidUsername"
    WEAK_PASSWORD = "WeakPassword"
    INVALID_CREDENTIALS = "InvalidCredentials"
    ACCOUNT_NOT_FOUND = "AccountNotFound"
    MESSAGE_NOT_FOUND = "MessageNotFound"
    INVALID_MESSAGE_TEXT = "InvalidMessageText"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str


Result = Union[Ok[T], Err]


STATUS_BY_KIND = {
    ErrorKind.DUPLICATE_USERNAME: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_USERNAME: status.HTTP_400_BAD_REQUEST,
    ErrorKind.WEAK_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.ACCOUNT_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    ErrorKind.MESSAGE_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_MESSAGE_TEXT: status.HTTP_400_BAD_REQUEST,
}


def status_for(kind: ErrorKind) -> int:
    """HTTP status code for an error kind."""
    return STATUS_BY_KIND[kind]
