"""Contact form routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from portfolio_cms.api.dependencies import Pagination, require_roles
from portfolio_cms.api.schemas.common import PageMeta, PaginatedResponse
from portfolio_cms.api.schemas.site import ContactInquiryRequest, ContactInquiryResponse
from portfolio_cms.constants.roles import STAFF_ROLES
from portfolio_cms.data.db import get_session
from portfolio_cms.data.models import User
from portfolio_cms.services import contact

router = APIRouter(prefix="/contact", tags=["contact"])

StaffUser = Annotated[User, Depends(require_roles(*STAFF_ROLES))]
InquiryId = Annotated[str, Path(description="Inquiry id")]


@router.post("", response_model=ContactInquiryResponse, status_code=status.HTTP_201_CREATED)
def submit_inquiry(request: ContactInquiryRequest) -> ContactInquiryResponse:
    with get_session() as session:
        inquiry = contact.submit_inquiry(
            session,
            name=request.name,
            email=request.email,
            subject=request.subject,
            message=request.message,
            phone=request.phone,
        )
        return ContactInquiryResponse.model_validate(inquiry)


@router.get("", response_model=PaginatedResponse[ContactInquiryResponse])
def list_inquiries(
    _: StaffUser,
    pagination: Pagination,
    unread_only: Annotated[bool, Query(description="Only unread inquiries")] = False,
) -> PaginatedResponse[ContactInquiryResponse]:
    with get_session() as session:
        page = contact.list_inquiries(session, unread_only=unread_only, page=pagination)
        return PaginatedResponse[ContactInquiryResponse](
            data=[ContactInquiryResponse.model_validate(item) for item in page.items],
            meta=PageMeta.from_page(page),
        )


@router.post("/{inquiry_id}/read", response_model=ContactInquiryResponse)
def mark_read(inquiry_id: InquiryId, _: StaffUser) -> ContactInquiryResponse:
    with get_session() as session:
        return ContactInquiryResponse.model_validate(contact.mark_read(session, inquiry_id))


@router.post("/{inquiry_id}/replied", response_model=ContactInquiryResponse)
def mark_replied(inquiry_id: InquiryId, _: StaffUser) -> ContactInquiryResponse:
    with get_session() as session:
        return ContactInquiryResponse.model_validate(contact.mark_replied(session, inquiry_id))


@router.delete("/{inquiry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inquiry(inquiry_id: InquiryId, _: StaffUser) -> None:
    with get_session() as session:
        contact.delete_inquiry(session, inquiry_id)
