"""
Account registration and login rules.
"""

import logging

from social_api.errors import Err, ErrorKind, Ok, Result
from social_api.records import Account
from social_api.storage import Store
from social_api.validation import is_blank

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 4


class AccountService:
    def __init__(self, store: Store):
        self.store = store

    def register(self, candidate: Account) -> Result[Account]:
        """
        Register a new account.

        Checks run in a fixed order and the first failure wins:
        duplicate username, blank username, short password.
        Nothing is written unless every check passes.
        """
        if candidate.username is not None and self.store.find_account_by_username(candidate.username):
            logger.info(f"Registration rejected, username taken: {candidate.username!r}")
            return Err(ErrorKind.DUPLICATE_USERNAME, "Username already exists. Try a different username")

        if is_blank(candidate.username):
            logger.info("Registration rejected, blank username")
            return Err(ErrorKind.INVALID_USERNAME, "Username cannot be blank")

        if candidate.password is None or len(candidate.password) < PASSWORD_MIN_LENGTH:
            logger.info(f"Registration rejected, weak password for {candidate.username!r}")
            return Err(
                ErrorKind.WEAK_PASSWORD,
                f"Password needs to be at least {PASSWORD_MIN_LENGTH} characters long",
            )

        account = self.store.save_account(Account(username=candidate.username, password=candidate.password))
        logger.info(f"Account registered: id={account.account_id}, username={account.username!r}")
        return Ok(account)

    def login(self, username, password) -> Result[Account]:
        # Unknown username and wrong password are reported identically
        account = None
        if username is not None and password is not None:
            account = self.store.find_account_by_credentials(username, password)
        if account is None:
            logger.info(f"Login failed for {username!r}")
            return Err(ErrorKind.INVALID_CREDENTIALS, "Invalid username or password.")

        logger.info(f"Login succeeded: id={account.account_id}")
        return Ok(account)
