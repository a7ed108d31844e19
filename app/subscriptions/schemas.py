from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field, StrictInt

from app.subscriptions.dates import format_month_year
from app.subscriptions.models import Subscription


class SubscriptionCreate(BaseModel):
    service_name: str = Field(default="", examples=["Netflix"])
    price: StrictInt = Field(examples=[599])
    user_id: str = Field(default="", examples=["60601fee-2bf1-4721-ae6f-7636e79a0cba"])
    start_date: str = Field(default="", examples=["01-2023"])
    end_date: str | None = Field(default=None, examples=["12-2023"])


class SubscriptionPatch(BaseModel):
    """Partial update; ``None`` leaves a field untouched, ``end_date=""`` clears it."""

    service_name: str | None = Field(default=None, examples=["Yandex Plus"])
    price: StrictInt | None = Field(default=None, examples=[399])
    start_date: str | None = Field(default=None, examples=["02-2023"])
    end_date: str | None = Field(default=None, examples=["12-2023"])


class SubscriptionRead(BaseModel):
    id: UUID
    service_name: str
    price: int
    user_id: UUID
    start_date: str
    end_date: str | None = None

    @classmethod
    def from_entity(cls, subscription: Subscription) -> SubscriptionRead:
        return cls(
            id=subscription.id,
            service_name=subscription.service_name,
            price=subscription.price,
            user_id=subscription.user_id,
            start_date=format_month_year(subscription.start_date),
            end_date=format_month_year(subscription.end_date) if subscription.end_date is not None else None,
        )


class SummaryQuery(BaseModel):
    user_id: str | None = None
    service_name: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class SubscriptionSummary(BaseModel):
    total_price: int


class ErrorResponse(BaseModel):
    error: str = Field(examples=["invalid start date format"])
