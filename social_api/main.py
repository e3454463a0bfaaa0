import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Response, Request, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from social_api.account_service import AccountService
from social_api.config import settings
from social_api.errors import Err, status_for
from social_api.logging_utils import setup_logging, RequestLoggingMiddleware, log_outcome_data
from social_api.message_service import MessageService
from social_api.metrics import record_service_outcome, get_metrics, get_metrics_content_type
from social_api.schemas import (
    AccountRequest,
    AccountResponse,
    ErrorResponse,
    HealthResponse,
    MessageRequest,
    MessageResponse,
    MessageUpdateRequest,
)
from social_api.storage import SqlAlchemyStore, init_db, check_db_health, get_db


# Setup structured JSON logging
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    - Startup: Initialize database and create tables
    """
    init_db()
    logger.info(f"Missing account policy: {settings.MISSING_ACCOUNT_POLICY}")
    yield


app = FastAPI(
    title="Social Media API",
    description="Account registration/login and message CRUD",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)


# =============================================================================
# Dependencies
# =============================================================================

def get_store(db: Session = Depends(get_db)) -> SqlAlchemyStore:
    return SqlAlchemyStore(db)


def get_account_service(store: SqlAlchemyStore = Depends(get_store)) -> AccountService:
    return AccountService(store)


def get_message_service(store: SqlAlchemyStore = Depends(get_store)) -> MessageService:
    return MessageService(store, missing_account_policy=settings.MISSING_ACCOUNT_POLICY)


def _succeeded(request: Request, operation: str) -> None:
    record_service_outcome(operation, "ok")
    log_outcome_data(request, operation, "ok")


def _failed(request: Request, operation: str, err: Err) -> JSONResponse:
    """Render a service error with the status mapped from its kind."""
    record_service_outcome(operation, err.kind.value)
    log_outcome_data(request, operation, err.kind.value)
    return JSONResponse(
        status_code=status_for(err.kind),
        content=ErrorResponse(detail=err.message, error=err.kind.value).model_dump(),
    )


def _empty() -> Response:
    return Response(status_code=status.HTTP_200_OK)


_account_errors = {
    400: {"model": ErrorResponse, "description": "Blank username or short password"},
    409: {"model": ErrorResponse, "description": "Username already exists"},
}
_message_errors = {
    400: {"model": ErrorResponse, "description": "Unknown account/message or invalid message text"},
}


# =============================================================================
# Health Check Routes
# =============================================================================

@app.get("/health/live", response_model=HealthResponse)
async def health_live() -> HealthResponse:
    """Liveness probe - always returns 200 once the app is running."""
    return HealthResponse(status="ok")


@app.get("/health/ready", response_model=HealthResponse)
async def health_ready(response: Response) -> HealthResponse:
    """
    Readiness probe - returns 200 only if the DB is reachable and the
    account and message tables exist, otherwise 503.
    """
    if not check_db_health():
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(
            status="not_ready",
            reason="Database not reachable or schema not applied"
        )
    return HealthResponse(status="ready")


# =============================================================================
# Account Routes
# =============================================================================

@app.post("/register", response_model=AccountResponse, responses=_account_errors)
def register(
    request: Request,
    payload: AccountRequest,
    service: AccountService = Depends(get_account_service),
):
    """
    Register a new account.

    - 409 if the username is already registered
    - 400 if the username is blank or the password is shorter than 4 characters
    """
    result = service.register(payload.to_record())
    if isinstance(result, Err):
        return _failed(request, "register", result)
    _succeeded(request, "register")
    return AccountResponse.from_record(result.value)


@app.post(
    "/login",
    response_model=AccountResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
)
def login(
    request: Request,
    payload: AccountRequest,
    service: AccountService = Depends(get_account_service),
):
    """Log in with an exact username and password match."""
    result = service.login(payload.username, payload.password)
    if isinstance(result, Err):
        return _failed(request, "login", result)
    _succeeded(request, "login")
    return AccountResponse.from_record(result.value)


# =============================================================================
# Message Routes
# =============================================================================

@app.post("/messages", response_model=MessageResponse, responses=_message_errors)
def create_message(
    request: Request,
    payload: MessageRequest,
    service: MessageService = Depends(get_message_service),
):
    """
    Create a message.

    - 400 if postedBy does not reference an existing account
    - 400 if messageText is missing, blank or longer than 255 characters
    """
    result = service.create_message(payload.to_record())
    if isinstance(result, Err):
        return _failed(request, "create_message", result)
    _succeeded(request, "create_message")
    return MessageResponse.from_record(result.value)


@app.get("/messages", response_model=List[MessageResponse])
def list_messages(service: MessageService = Depends(get_message_service)):
    """All messages, in creation order. Empty list when there are none."""
    return [MessageResponse.from_record(m) for m in service.get_all_messages()]


@app.get("/messages/{message_id}", response_model=Optional[MessageResponse])
def get_message(message_id: int, service: MessageService = Depends(get_message_service)):
    """The message, or 200 with an empty body when it does not exist."""
    message = service.get_message_by_id(message_id)
    if message is None:
        return _empty()
    return MessageResponse.from_record(message)


@app.delete("/messages/{message_id}", response_model=Optional[int])
def delete_message(message_id: int, service: MessageService = Depends(get_message_service)):
    """
    Delete a message.

    Body is 1 when a message was deleted, empty when there was none.
    Status is 200 in both cases.
    """
    deleted = service.delete_message_by_id(message_id)
    if deleted == 0:
        return _empty()
    return deleted


@app.patch("/messages/{message_id}", response_model=int, responses=_message_errors)
def update_message(
    request: Request,
    message_id: int,
    payload: MessageUpdateRequest,
    service: MessageService = Depends(get_message_service),
):
    """
    Replace the text of a message. Body is the number of updated rows (1).

    - 400 if the message does not exist
    - 400 if messageText is missing, blank or longer than 255 characters
    """
    result = service.update_message(message_id, payload.message_text)
    if isinstance(result, Err):
        return _failed(request, "update_message", result)
    _succeeded(request, "update_message")
    return result.value


@app.get(
    "/accounts/{account_id}/messages",
    response_model=List[MessageResponse],
    responses={400: {"model": ErrorResponse, "description": "Account does not exist"}},
)
def list_account_messages(
    request: Request,
    account_id: int,
    service: MessageService = Depends(get_message_service),
):
    """
    Messages posted by an account, in creation order.

    For an unknown account the response depends on MISSING_ACCOUNT_POLICY:
    400 AccountNotFound ("error") or an empty list ("empty").
    """
    result = service.get_all_messages_from_user(account_id)
    if isinstance(result, Err):
        return _failed(request, "list_account_messages", result)
    _succeeded(request, "list_account_messages")
    return [MessageResponse.from_record(m) for m in result.value]


# =============================================================================
# Metrics Route
# =============================================================================

@app.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus-style metrics."""
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type()
    )
