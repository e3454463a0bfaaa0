"""
SQLAlchemy ORM models for database tables.

This module contains database table definitions using SQLAlchemy.
Rows never leave the store; see records.py for the types services use
and schemas.py for the Pydantic request/response schemas.
"""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String, Text

from social_api.storage import Base


class AccountRow(Base):
    """
    SQLAlchemy model for registered accounts.

    Table: account
    Username uniqueness is checked by the account service, not by the schema.
    """
    __tablename__ = "account"

    account_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False, index=True)
    password = Column(Text, nullable=False)


class MessageRow(Base):
    """
    SQLAlchemy model for posted messages.

    Table: message
    """
    __tablename__ = "message"

    message_id = Column(Integer, primary_key=True, autoincrement=True)
    posted_by = Column(Integer, ForeignKey("account.account_id"), nullable=False, index=True)
    message_text = Column(String(255), nullable=False)
    time_posted_epoch = Column(BigInteger, nullable=True)  # opaque, passed through
