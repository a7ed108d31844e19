from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from opentelemetry import trace

from app.metrics import observe_subscription_operation
from app.subscriptions.dates import parse_month_year
from app.subscriptions.errors import AggregationError, NotFoundError, StorageError, ValidationError
from app.subscriptions.models import Subscription
from app.subscriptions.repository import SubscriptionGateway, SummaryFilter
from app.subscriptions.schemas import SubscriptionCreate, SubscriptionPatch, SubscriptionSummary, SummaryQuery


logger = logging.getLogger("app.subscriptions")
tracer = trace.get_tracer("app.subscriptions")

_UNSET = object()


def _parse_uuid(value: str, message: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(message) from None


def _parse_date(value: str, message: str) -> date:
    try:
        return parse_month_year(value)
    except ValueError:
        raise ValidationError(message) from None


@dataclass(slots=True)
class _PreparedPatch:
    service_name: str | object = _UNSET
    price: int | object = _UNSET
    start_date: date | object = _UNSET
    end_date: date | None | object = _UNSET


class SubscriptionService:
    """Business rules for subscription records.

    Every public method either returns a value or raises a
    ``SubscriptionError`` subclass; storage exceptions are converted by the
    gateway before they reach this layer.
    """

    def __init__(self, gateway: SubscriptionGateway) -> None:
        self.gateway = gateway

    def create_subscription(self, payload: SubscriptionCreate) -> Subscription:
        if payload.service_name == "":
            raise ValidationError("service name is required")
        if payload.price < 0:
            raise ValidationError("price must be >= 0")
        user_id = _parse_uuid(payload.user_id, "user_id must be valid UUID")
        start_date = _parse_date(payload.start_date, "invalid start date format")
        end_date = None
        if payload.end_date is not None:
            end_date = _parse_date(payload.end_date, "invalid end date format")

        subscription = Subscription(
            id=uuid.uuid4(),
            service_name=payload.service_name,
            price=payload.price,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
        )
        stored = self.gateway.insert(subscription)
        observe_subscription_operation("create", "ok")
        logger.info("subscription.created", extra={"subscription_id": str(stored.id), "user_id": str(stored.user_id)})
        return stored

    def list_subscriptions(self) -> Sequence[Subscription]:
        subscriptions = self.gateway.find_all()
        observe_subscription_operation("list", "ok")
        return subscriptions

    def list_subscriptions_by_user(self, user_id: str) -> Sequence[Subscription]:
        parsed = _parse_uuid(user_id, "invalid user ID")
        subscriptions = self.gateway.find_by_user(parsed)
        observe_subscription_operation("list_by_user", "ok")
        return subscriptions

    def delete_subscription(self, subscription_id: str) -> None:
        parsed = _parse_uuid(subscription_id, "invalid subscription ID")
        deleted = self.gateway.delete_by_id(parsed)
        if deleted == 0:
            observe_subscription_operation("delete", "not_found")
            raise NotFoundError("subscription not found")
        observe_subscription_operation("delete", "ok")
        logger.info("subscription.deleted", extra={"subscription_id": str(parsed)})

    def update_subscription(self, subscription_id: str, patch: SubscriptionPatch) -> Subscription:
        parsed = _parse_uuid(subscription_id, "invalid subscription ID")
        try:
            subscription = self.gateway.find_by_id(parsed)
        except NotFoundError:
            observe_subscription_operation("update", "not_found")
            raise

        prepared = self._prepare_patch(patch)
        self._apply_patch(subscription, prepared)

        updated = self.gateway.update(subscription)
        observe_subscription_operation("update", "ok")
        logger.info("subscription.updated", extra={"subscription_id": str(updated.id)})
        return updated

    def get_subscription_summary(self, query: SummaryQuery) -> SubscriptionSummary:
        if not query.start_date or not query.end_date:
            raise ValidationError("missing start or end date")
        start_date = _parse_date(query.start_date, "invalid start date")
        end_date = _parse_date(query.end_date, "invalid end date")
        user_id = _parse_uuid(query.user_id, "invalid user ID") if query.user_id else None

        summary_filter = SummaryFilter(
            start_date=start_date,
            end_date=end_date,
            user_id=user_id,
            service_name=query.service_name or None,
        )
        with tracer.start_as_current_span("subscriptions.summary") as span:
            span.set_attribute("summary.start_date", start_date.isoformat())
            span.set_attribute("summary.end_date", end_date.isoformat())
            try:
                total = self.gateway.sum_price(summary_filter)
            except StorageError as exc:
                observe_subscription_operation("summary", "error")
                raise AggregationError("failed to fetch subscription summary") from exc
        observe_subscription_operation("summary", "ok")
        return SubscriptionSummary(total_price=total)

    # Fields are validated in the order service_name, price, start_date,
    # end_date and only applied once all of them are valid.
    def _prepare_patch(self, patch: SubscriptionPatch) -> _PreparedPatch:
        prepared = _PreparedPatch()
        if patch.service_name is not None:
            prepared.service_name = patch.service_name
        if patch.price is not None:
            if patch.price < 0:
                raise ValidationError("price must be >= 0")
            prepared.price = patch.price
        if patch.start_date is not None:
            prepared.start_date = _parse_date(patch.start_date, "invalid start date format")
        if patch.end_date is not None:
            if patch.end_date == "":
                prepared.end_date = None
            else:
                prepared.end_date = _parse_date(patch.end_date, "invalid end date format")
        return prepared

    @staticmethod
    def _apply_patch(subscription: Subscription, prepared: _PreparedPatch) -> None:
        for field_name in ("service_name", "price", "start_date", "end_date"):
            value = getattr(prepared, field_name)
            if value is not _UNSET:
                setattr(subscription, field_name, value)
