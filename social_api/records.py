"""
Plain record types exchanged between the services and the store.

Records are immutable snapshots. A record without an id has not been
persisted yet; the store returns a copy carrying the assigned id.
"""

from dataclasses import dataclass
from typing import Optional

# Range of a 64-bit signed INTEGER column
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class Account:
    username: Optional[str]
    password: Optional[str]
    account_id: Optional[int] = None


@dataclass(frozen=True)
class Message:
    posted_by: Optional[int]
    message_text: Optional[str]
    time_posted_epoch: Optional[int] = None
    message_id: Optional[int] = None
