import logging
from typing import Generator, List, Optional, Protocol

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from social_api.config import settings
from social_api.records import INT64_MAX, INT64_MIN, Account, Message

logger = logging.getLogger(__name__)

# check_same_thread=False is required for SQLite since FastAPI runs sync
# route handlers in a threadpool
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args,
    echo=False,
)

# Create SessionLocal class for creating database sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for SQLAlchemy models
Base = declarative_base()

REQUIRED_TABLES = ("account", "message")


def init_db() -> None:
    """
    Initialize the database by creating all tables.
    Called during application startup.
    """
    logger.debug(f"Initializing database with URL: {settings.DATABASE_URL}")
    try:
        # Import models to register them with Base.metadata
        from social_api import models  # noqa: F401

        logger.debug("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session.
    Yields a session and ensures it's closed after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_health() -> bool:
    """
    Check if the database is reachable and schema is applied.

    Returns:
        True if DB is healthy and both tables exist, False otherwise.
    """
    logger.debug("Checking database health...")
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
            logger.debug("Database connectivity OK")

        inspector = inspect(engine)
        for table in REQUIRED_TABLES:
            if not inspector.has_table(table):
                logger.error(f"Database schema not applied: '{table}' table not found")
                return False
        logger.debug("Database health check passed")
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


# =============================================================================
# Store Contract
# =============================================================================

class Store(Protocol):
    """Record persistence used by the account and message services."""

    def find_account_by_id(self, account_id: int) -> Optional[Account]: ...

    def find_account_by_username(self, username: str) -> Optional[Account]: ...

    def find_account_by_credentials(self, username: str, password: str) -> Optional[Account]: ...

    def account_exists(self, account_id: int) -> bool: ...

    def save_account(self, account: Account) -> Account: ...

    def find_message_by_id(self, message_id: int) -> Optional[Message]: ...

    def message_exists(self, message_id: int) -> bool: ...

    def save_message(self, message: Message) -> Message: ...

    def delete_message(self, message_id: int) -> None: ...

    def find_all_messages(self) -> List[Message]: ...

    def find_messages_by_poster(self, account_id: int) -> List[Message]: ...


def _storable_key(key: int) -> bool:
    # Keys outside the INTEGER range cannot match a stored row
    return INT64_MIN <= key <= INT64_MAX


def _to_account(row) -> Account:
    return Account(
        account_id=row.account_id,
        username=row.username,
        password=row.password,
    )


def _to_message(row) -> Message:
    return Message(
        message_id=row.message_id,
        posted_by=row.posted_by,
        message_text=row.message_text,
        time_posted_epoch=row.time_posted_epoch,
    )


class SqlAlchemyStore:
    """
    Store backed by a SQLAlchemy session.

    Every write commits on its own; a failed write is rolled back and the
    database error is re-raised unchanged.
    """

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def find_account_by_id(self, account_id: int) -> Optional[Account]:
        from social_api.models import AccountRow

        if not _storable_key(account_id):
            return None
        row = self.db.get(AccountRow, account_id)
        return _to_account(row) if row is not None else None

    def find_account_by_username(self, username: str) -> Optional[Account]:
        from social_api.models import AccountRow

        logger.debug(f"Looking up account by username: {username!r}")
        row = self.db.query(AccountRow).filter(AccountRow.username == username).first()
        return _to_account(row) if row is not None else None

    def find_account_by_credentials(self, username: str, password: str) -> Optional[Account]:
        from social_api.models import AccountRow

        row = (
            self.db.query(AccountRow)
            .filter(AccountRow.username == username, AccountRow.password == password)
            .first()
        )
        return _to_account(row) if row is not None else None

    def account_exists(self, account_id: int) -> bool:
        return self.find_account_by_id(account_id) is not None

    def save_account(self, account: Account) -> Account:
        from social_api.models import AccountRow

        row = AccountRow(
            account_id=account.account_id,
            username=account.username,
            password=account.password,
        )
        saved = self._save(row, account.account_id)
        logger.info(f"Account saved: id={saved.account_id}")
        return _to_account(saved)

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def find_message_by_id(self, message_id: int) -> Optional[Message]:
        from social_api.models import MessageRow

        if not _storable_key(message_id):
            return None
        row = self.db.get(MessageRow, message_id)
        return _to_message(row) if row is not None else None

    def message_exists(self, message_id: int) -> bool:
        return self.find_message_by_id(message_id) is not None

    def save_message(self, message: Message) -> Message:
        from social_api.models import MessageRow

        row = MessageRow(
            message_id=message.message_id,
            posted_by=message.posted_by,
            message_text=message.message_text,
            time_posted_epoch=message.time_posted_epoch,
        )
        saved = self._save(row, message.message_id)
        logger.info(f"Message saved: id={saved.message_id}, posted_by={saved.posted_by}")
        return _to_message(saved)

    def delete_message(self, message_id: int) -> None:
        from social_api.models import MessageRow

        if not _storable_key(message_id):
            return
        try:
            self.db.query(MessageRow).filter(MessageRow.message_id == message_id).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete message {message_id}: {e}")
            raise
        logger.info(f"Message deleted: id={message_id}")

    def find_all_messages(self) -> List[Message]:
        from social_api.models import MessageRow

        rows = self.db.query(MessageRow).order_by(MessageRow.message_id.asc()).all()
        logger.debug(f"Retrieved {len(rows)} messages")
        return [_to_message(row) for row in rows]

    def find_messages_by_poster(self, account_id: int) -> List[Message]:
        from social_api.models import MessageRow

        if not _storable_key(account_id):
            return []
        rows = (
            self.db.query(MessageRow)
            .filter(MessageRow.posted_by == account_id)
            .order_by(MessageRow.message_id.asc())
            .all()
        )
        logger.debug(f"Retrieved {len(rows)} messages posted by account {account_id}")
        return [_to_message(row) for row in rows]

    def _save(self, row, key: Optional[int]):
        """Insert the row, or overwrite the stored one when its key is set."""
        try:
            if key is not None:
                row = self.db.merge(row)
            else:
                self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save {type(row).__name__}: {e}")
            raise
        return row
