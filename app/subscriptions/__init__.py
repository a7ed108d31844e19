from app.subscriptions.api import router
from app.subscriptions.errors import (
    AggregationError,
    NotFoundError,
    StorageError,
    SubscriptionError,
    ValidationError,
)
from app.subscriptions.models import Subscription
from app.subscriptions.repository import SubscriptionGateway, SubscriptionRepository, SummaryFilter
from app.subscriptions.schemas import (
    SubscriptionCreate,
    SubscriptionPatch,
    SubscriptionRead,
    SubscriptionSummary,
    SummaryQuery,
)
from app.subscriptions.service import SubscriptionService

__all__ = [
    "router",
    "Subscription",
    "SubscriptionGateway",
    "SubscriptionRepository",
    "SummaryFilter",
    "SubscriptionCreate",
    "SubscriptionPatch",
    "SubscriptionRead",
    "SubscriptionSummary",
    "SummaryQuery",
    "SubscriptionService",
    "SubscriptionError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "AggregationError",
]
