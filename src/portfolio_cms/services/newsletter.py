"""Newsletter subscription service.

Subscribing is idempotent and unsubscribing only deactivates the row, so a
returning subscriber keeps the original record.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from portfolio_cms.data.crud.delegates import NewsletterDelegate
from portfolio_cms.data.models import Newsletter
from portfolio_cms.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _normalize(email: str) -> str:
    cleaned = email.strip().lower()
    if not cleaned or "@" not in cleaned:
        raise ValidationError("Invalid email address")
    return cleaned


def subscribe(session: Session, email: str) -> Newsletter:
    """Subscribe ``email``, reactivating an earlier subscription if present."""
    address = _normalize(email)
    subscriptions = NewsletterDelegate(session)
    existing = subscriptions.find_by_email(address)
    if existing is not None:
        if not existing.is_active:
            existing.is_active = True
            session.flush()
            logger.info("Newsletter subscription %s reactivated", existing.id)
        return existing

    subscription = subscriptions.create(email=address)
    logger.info("Newsletter subscription %s created", subscription.id)
    return subscription


def unsubscribe(session: Session, email: str) -> Newsletter:
    subscription = NewsletterDelegate(session).find_by_email(_normalize(email))
    if subscription is None:
        raise NotFoundError("Email is not subscribed")
    subscription.is_active = False
    session.flush()
    logger.info("Newsletter subscription %s deactivated", subscription.id)
    return subscription


def list_subscribers(session: Session, *, active_only: bool = True) -> list[Newsletter]:
    where = {"is_active": True} if active_only else None
    return NewsletterDelegate(session).find_many(where, order_by="-subscribed_at")


def subscriber_counts(session: Session) -> dict[str, int]:
    counts = {"active": 0, "inactive": 0}
    for group in NewsletterDelegate(session).group_by(["is_active"]):
        counts["active" if group["is_active"] else "inactive"] = group["_count"]
    counts["total"] = counts["active"] + counts["inactive"]
    return counts
