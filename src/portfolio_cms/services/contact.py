"""Contact inquiry service for the public contact form."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from portfolio_cms.data.crud.delegates import ContactInquiryDelegate
from portfolio_cms.data.models import ContactInquiry
from portfolio_cms.errors import ValidationError
from portfolio_cms.services.pagination import Page, PageRequest

logger = logging.getLogger(__name__)


def submit_inquiry(
    session: Session,
    *,
    name: str,
    email: str,
    subject: str,
    message: str,
    phone: str | None = None,
) -> ContactInquiry:
    fields = {"name": name, "email": email, "subject": subject, "message": message}
    blank = [key for key, value in fields.items() if not value or not value.strip()]
    if blank:
        raise ValidationError(f"Missing field(s): {', '.join(blank)}")

    inquiry = ContactInquiryDelegate(session).create(
        name=name.strip(),
        email=email.strip().lower(),
        subject=subject.strip(),
        message=message.strip(),
        phone=phone.strip() if phone else None,
    )
    logger.info("Contact inquiry %s received", inquiry.id)
    return inquiry


def list_inquiries(
    session: Session, *, unread_only: bool = False, page: PageRequest | None = None
) -> Page[ContactInquiry]:
    page = page or PageRequest()
    inquiries = ContactInquiryDelegate(session)
    where = {"is_read": False} if unread_only else {}
    items = inquiries.find_many(
        where, order_by=["-created_at", "id"], skip=page.skip, take=page.limit
    )
    return Page(items=items, total=inquiries.count(**where), request=page)


def mark_read(session: Session, inquiry_id: str) -> ContactInquiry:
    return ContactInquiryDelegate(session).update({"id": inquiry_id}, is_read=True)


def mark_replied(session: Session, inquiry_id: str) -> ContactInquiry:
    """Replying implies the inquiry has been read."""
    return ContactInquiryDelegate(session).update(
        {"id": inquiry_id}, is_read=True, is_replied=True
    )


def delete_inquiry(session: Session, inquiry_id: str) -> None:
    ContactInquiryDelegate(session).delete(id=inquiry_id)


def unread_count(session: Session) -> int:
    return ContactInquiryDelegate(session).count(is_read=False)
