from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.subscriptions.errors import NotFoundError, SubscriptionError, ValidationError
from app.subscriptions.repository import SubscriptionRepository
from app.subscriptions.schemas import (
    ErrorResponse,
    SubscriptionCreate,
    SubscriptionPatch,
    SubscriptionRead,
    SubscriptionSummary,
    SummaryQuery,
)
from app.subscriptions.service import SubscriptionService


router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])

_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Bad Request"}}
_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Not Found"}}
_INTERNAL = {status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Internal Server Error"}}


def get_subscription_service(db: Session = Depends(get_db)) -> SubscriptionService:
    return SubscriptionService(SubscriptionRepository(db))


def status_for_error(exc: SubscriptionError) -> int:
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    # StorageError and AggregationError are server-side failures.
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def subscription_error_handler(request: Request, exc: SubscriptionError) -> JSONResponse:
    return JSONResponse(status_code=status_for_error(exc), content={"error": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        message = "invalid request"
    elif errors[0].get("type") == "json_invalid":
        message = "invalid JSON"
    else:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else str(first.get("msg", "invalid value"))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@router.post(
    "",
    response_model=SubscriptionRead,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a subscription",
    responses={**_BAD_REQUEST, **_INTERNAL},
)
def create_subscription(
    payload: SubscriptionCreate,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionRead:
    return SubscriptionRead.from_entity(service.create_subscription(payload))


@router.get(
    "",
    response_model=list[SubscriptionRead],
    response_model_exclude_none=True,
    summary="List all subscriptions",
    responses=_INTERNAL,
)
def list_subscriptions(service: SubscriptionService = Depends(get_subscription_service)) -> list[SubscriptionRead]:
    return [SubscriptionRead.from_entity(item) for item in service.list_subscriptions()]


@router.get(
    "/summary",
    response_model=SubscriptionSummary,
    summary="Total price of subscriptions started within a period",
    responses={**_BAD_REQUEST, **_INTERNAL},
)
def get_subscription_summary(
    user_id: str | None = Query(default=None, description="Subscriber UUID"),
    service_name: str | None = Query(default=None, description="Exact service name"),
    start_date: str | None = Query(default=None, description="Period start (MM-YYYY)"),
    end_date: str | None = Query(default=None, description="Period end (MM-YYYY)"),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionSummary:
    return service.get_subscription_summary(
        SummaryQuery(user_id=user_id, service_name=service_name, start_date=start_date, end_date=end_date)
    )


@router.get(
    "/{user_id}",
    response_model=list[SubscriptionRead],
    response_model_exclude_none=True,
    summary="List subscriptions of one user",
    responses={**_BAD_REQUEST, **_INTERNAL},
)
def list_user_subscriptions(
    user_id: str,
    service: SubscriptionService = Depends(get_subscription_service),
) -> list[SubscriptionRead]:
    return [SubscriptionRead.from_entity(item) for item in service.list_subscriptions_by_user(user_id)]


@router.put(
    "/{subscription_id}",
    response_model=SubscriptionRead,
    response_model_exclude_none=True,
    summary="Update fields of a subscription",
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_INTERNAL},
)
def update_subscription(
    subscription_id: str,
    payload: SubscriptionPatch,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionRead:
    return SubscriptionRead.from_entity(service.update_subscription(subscription_id, payload))


@router.delete(
    "/{subscription_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a subscription",
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_INTERNAL},
)
def delete_subscription(
    subscription_id: str,
    service: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    service.delete_subscription(subscription_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
