"""
Message creation, lookup, update and deletion rules.
"""

import logging
from dataclasses import replace
from typing import List, Optional

from social_api.errors import Err, ErrorKind, Ok, Result
from social_api.records import Message
from social_api.storage import Store
from social_api.validation import is_blank

logger = logging.getLogger(__name__)

MESSAGE_TEXT_MAX_LENGTH = 255

MISSING_ACCOUNT_ERROR = "error"
MISSING_ACCOUNT_EMPTY = "empty"

INVALID_TEXT = Err(
    ErrorKind.INVALID_MESSAGE_TEXT,
    f"Message cannot be blank or over {MESSAGE_TEXT_MAX_LENGTH} characters.",
)


def is_valid_text(text: Optional[str]) -> bool:
    return not is_blank(text) and len(text) <= MESSAGE_TEXT_MAX_LENGTH


class MessageService:
    """
    Business rules for messages.

    Args:
        store: record store shared with the account service
        missing_account_policy: what listing the messages of an unknown
            account yields, "error" (AccountNotFound) or "empty" (no messages)
    """

    def __init__(self, store: Store, missing_account_policy: str = MISSING_ACCOUNT_ERROR):
        if missing_account_policy not in (MISSING_ACCOUNT_ERROR, MISSING_ACCOUNT_EMPTY):
            raise ValueError(f"Unknown missing account policy: {missing_account_policy!r}")
        self.store = store
        self.missing_account_policy = missing_account_policy

    def create_message(self, candidate: Message) -> Result[Message]:
        if candidate.posted_by is None or not self.store.account_exists(candidate.posted_by):
            logger.info(f"Message rejected, unknown account: {candidate.posted_by}")
            return Err(ErrorKind.ACCOUNT_NOT_FOUND, "The account does not exist.")

        if not is_valid_text(candidate.message_text):
            logger.info(f"Message rejected, invalid text from account {candidate.posted_by}")
            return INVALID_TEXT

        message = self.store.save_message(replace(candidate, message_id=None))
        logger.info(f"Message created: id={message.message_id}, posted_by={message.posted_by}")
        return Ok(message)

    def get_all_messages(self) -> List[Message]:
        return self.store.find_all_messages()

    def get_message_by_id(self, message_id: int) -> Optional[Message]:
        """Return the message, or None when it does not exist."""
        return self.store.find_message_by_id(message_id)

    def delete_message_by_id(self, message_id: int) -> int:
        """
        Delete a message.

        Returns:
            1 if a message was deleted, 0 if there was nothing to delete
        """
        if not self.store.message_exists(message_id):
            logger.debug(f"Nothing to delete for message {message_id}")
            return 0
        self.store.delete_message(message_id)
        return 1

    def update_message(self, message_id: int, new_text: Optional[str]) -> Result[int]:
        """
        Replace the text of a message, leaving every other field as stored.

        The author reference is not re-checked here; it was validated when
        the message was created.
        """
        message = self.store.find_message_by_id(message_id)
        if message is None:
            logger.info(f"Update rejected, unknown message: {message_id}")
            return Err(ErrorKind.MESSAGE_NOT_FOUND, f"Message {message_id} does not exist.")

        if not is_valid_text(new_text):
            logger.info(f"Update rejected, invalid text for message {message_id}")
            return INVALID_TEXT

        self.store.save_message(replace(message, message_text=new_text))
        logger.info(f"Message updated: id={message_id}")
        return Ok(1)

    def get_all_messages_from_user(self, account_id: int) -> Result[List[Message]]:
        if not self.store.account_exists(account_id):
            if self.missing_account_policy == MISSING_ACCOUNT_EMPTY:
                return Ok([])
            logger.info(f"Listing rejected, unknown account: {account_id}")
            return Err(ErrorKind.ACCOUNT_NOT_FOUND, "The account does not exist.")

        return Ok(self.store.find_messages_by_poster(account_id))
