from __future__ import annotations

import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("DB_AUTO_MIGRATE", "false")

import pytest

from app.subscriptions.errors import StorageError
from app.subscriptions.models import Subscription
from app.subscriptions.repository import SummaryFilter
from app.subscriptions.service import SubscriptionService


class FailingGateway:
    def insert(self, subscription: Subscription) -> Subscription:
        raise StorageError("failed to create subscription")

    def find_all(self) -> list[Subscription]:
        raise StorageError("failed to fetch subscriptions")

    def find_by_user(self, user_id: uuid.UUID) -> list[Subscription]:
        raise StorageError("failed to fetch subscriptions")

    def find_by_id(self, subscription_id: uuid.UUID) -> Subscription:
        raise StorageError("failed to fetch subscription")

    def update(self, subscription: Subscription) -> Subscription:
        raise StorageError("failed to update subscription")

    def delete_by_id(self, subscription_id: uuid.UUID) -> int:
        raise StorageError("failed to delete subscription")

    def sum_price(self, summary_filter: SummaryFilter) -> int:
        raise StorageError("failed to fetch subscription summary")


@pytest.fixture()
def failing_service() -> SubscriptionService:
    return SubscriptionService(FailingGateway())
