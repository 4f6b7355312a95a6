# app/ticket/schemas.py
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.ticket.models import TicketStatus

# ids and page numbers are 32-bit on the wire
MAX_ID = 2**31 - 1
MIN_ID = -(2**31)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TicketBase(CamelModel):
    description: str = Field(..., min_length=1)
    status: TicketStatus


class TicketIn(TicketBase):
    @field_validator("description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description must not be blank")
        return value


class TicketCreate(TicketIn):
    """Incoming ticket; the server overrides status and timestamps."""


class TicketUpdate(TicketIn):
    id: int = Field(..., ge=MIN_ID, le=MAX_ID)


class TicketOut(TicketBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back without their zone
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class PaginationMeta(CamelModel):
    total_count: int
    page_size: int
    current_page: int
    total_pages: int


class TicketPage(CamelModel):
    data: list[TicketOut]
    pagination: PaginationMeta
