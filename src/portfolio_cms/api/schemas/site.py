"""Pydantic schemas for contact inquiries, newsletter and site settings."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactInquiryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(None, max_length=32)
    subject: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)


class ContactInquiryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: str | None
    subject: str
    message: str
    is_read: bool
    is_replied: bool
    created_at: datetime


class NewsletterRequest(BaseModel):
    email: EmailStr


class NewsletterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    is_active: bool
    subscribed_at: datetime


class NewsletterStatsResponse(BaseModel):
    active: int
    inactive: int
    total: int


class SettingUpdateRequest(BaseModel):
    value: str
    description: str | None = Field(None, max_length=255)


class SettingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    value: str
    description: str | None
    updated_at: datetime
