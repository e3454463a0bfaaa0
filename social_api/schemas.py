"""
Pydantic schemas for request/response validation.

This module contains:
- Request models for incoming account and message payloads
- Response models for API responses

Request fields are optional on purpose: a missing username, password or
message text is a business-rule failure (400/409), reported by the services,
not a schema failure (422).
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from social_api.records import INT64_MAX, INT64_MIN, Account, Message


# =============================================================================
# Pydantic Request Models
# =============================================================================

class AccountRequest(BaseModel):
    """Payload for POST /register and POST /login."""
    username: Optional[str] = Field(None, description="Account username")
    password: Optional[str] = Field(None, description="Account password")

    model_config = {
        "json_schema_extra": {
            "examples": [{"username": "testuser1", "password": "password"}]
        }
    }

    def to_record(self) -> Account:
        return Account(username=self.username, password=self.password)


class MessageRequest(BaseModel):
    """
    Payload for POST /messages.

    Accepts either timePostedEpoch or postedTime for the posting time.
    """
    posted_by: Optional[int] = Field(
        None,
        alias="postedBy",
        description="Id of the account posting the message"
    )
    message_text: Optional[str] = Field(
        None,
        alias="messageText",
        description="Message content, 1 to 255 characters"
    )
    time_posted_epoch: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("timePostedEpoch", "postedTime"),
        ge=INT64_MIN,
        le=INT64_MAX,
        description="Posting time as epoch seconds"
    )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {"postedBy": 1, "messageText": "hello message", "timePostedEpoch": 1669947792}
            ]
        }
    }

    def to_record(self) -> Message:
        return Message(
            posted_by=self.posted_by,
            message_text=self.message_text,
            time_posted_epoch=self.time_posted_epoch,
        )


class MessageUpdateRequest(BaseModel):
    """Payload for PATCH /messages/{message_id}; only messageText is used."""
    message_text: Optional[str] = Field(None, alias="messageText")

    model_config = {"populate_by_name": True}


# =============================================================================
# Pydantic Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Response model for error responses."""
    detail: str = Field(..., description="Error description")
    error: str = Field(..., description="Error kind, e.g. DuplicateUsername")


class AccountResponse(BaseModel):
    """Response model for a registered account, as stored."""
    account_id: int = Field(..., alias="accountId")
    username: str
    password: str

    model_config = {"populate_by_name": True}

    @classmethod
    def from_record(cls, account: Account) -> "AccountResponse":
        return cls(
            account_id=account.account_id,
            username=account.username,
            password=account.password,
        )


class MessageResponse(BaseModel):
    """Response model for a single message."""
    message_id: int = Field(..., alias="messageId")
    posted_by: int = Field(..., alias="postedBy")
    message_text: str = Field(..., alias="messageText")
    time_posted_epoch: Optional[int] = Field(None, alias="timePostedEpoch")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_record(cls, message: Message) -> "MessageResponse":
        return cls(
            message_id=message.message_id,
            posted_by=message.posted_by,
            message_text=message.message_text,
            time_posted_epoch=message.time_posted_epoch,
        )


class HealthResponse(BaseModel):
    """Response model for health check endpoints."""
    status: str = Field(..., description="Health status")
    reason: Optional[str] = Field(None, description="Reason if not ready")
