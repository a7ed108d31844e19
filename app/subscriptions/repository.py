from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from functools import wraps
from typing import Any, Protocol, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.subscriptions.errors import NotFoundError, StorageError
from app.subscriptions.models import Subscription


logger = logging.getLogger("app.subscriptions.repository")

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SummaryFilter:
    """Conjunctive filter: start_date <= row.start_date <= end_date, plus optional equality matches."""

    start_date: date
    end_date: date
    user_id: uuid.UUID | None = None
    service_name: str | None = None


class SubscriptionGateway(Protocol):
    """Storage contract consumed by SubscriptionService."""

    def insert(self, subscription: Subscription) -> Subscription:
        ...

    def find_all(self) -> Sequence[Subscription]:
        ...

    def find_by_user(self, user_id: uuid.UUID) -> Sequence[Subscription]:
        ...

    def find_by_id(self, subscription_id: uuid.UUID) -> Subscription:
        ...

    def update(self, subscription: Subscription) -> Subscription:
        ...

    def delete_by_id(self, subscription_id: uuid.UUID) -> int:
        ...

    def sum_price(self, summary_filter: SummaryFilter) -> int:
        ...


def _storage_operation(operation: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    def decorator(func_: Callable[..., T]) -> Callable[..., T]:
        @wraps(func_)
        def wrapper(self: SubscriptionRepository, *args: Any, **kwargs: Any) -> T:
            try:
                return func_(self, *args, **kwargs)
            except SQLAlchemyError as exc:
                self.session.rollback()
                logger.error("storage.failed", extra={"operation": operation, "error": str(exc)[:500]})
                raise StorageError(f"failed to {operation.replace('_', ' ')}") from exc

        return wrapper

    return decorator


class SubscriptionRepository:
    """SQLAlchemy-backed gateway bound to one request-scoped session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    @_storage_operation("create_subscription")
    def insert(self, subscription: Subscription) -> Subscription:
        self.session.add(subscription)
        self.session.commit()
        self.session.refresh(subscription)
        return subscription

    @_storage_operation("fetch_subscriptions")
    def find_all(self) -> list[Subscription]:
        return list(self.session.scalars(select(Subscription)))

    @_storage_operation("fetch_subscriptions")
    def find_by_user(self, user_id: uuid.UUID) -> list[Subscription]:
        return list(self.session.scalars(select(Subscription).where(Subscription.user_id == user_id)))

    @_storage_operation("fetch_subscription")
    def find_by_id(self, subscription_id: uuid.UUID) -> Subscription:
        subscription = self.session.get(Subscription, subscription_id)
        if subscription is None:
            raise NotFoundError("subscription not found")
        return subscription

    @_storage_operation("update_subscription")
    def update(self, subscription: Subscription) -> Subscription:
        merged = self.session.merge(subscription)
        self.session.commit()
        self.session.refresh(merged)
        return merged

    @_storage_operation("delete_subscription")
    def delete_by_id(self, subscription_id: uuid.UUID) -> int:
        result = self.session.execute(delete(Subscription).where(Subscription.id == subscription_id))
        self.session.commit()
        return result.rowcount or 0

    @_storage_operation("fetch_subscription_summary")
    def sum_price(self, summary_filter: SummaryFilter) -> int:
        query = select(func.coalesce(func.sum(Subscription.price), 0)).where(
            Subscription.start_date >= summary_filter.start_date,
            Subscription.start_date <= summary_filter.end_date,
        )
        if summary_filter.user_id is not None:
            query = query.where(Subscription.user_id == summary_filter.user_id)
        if summary_filter.service_name is not None:
            query = query.where(Subscription.service_name == summary_filter.service_name)
        return int(self.session.scalar(query) or 0)
