"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
JSON fields are camelCase; Python attributes are snake_case.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import AwareDatetime, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from src.domain.models import AttendeeRegistration


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegistrationRequest(CamelModel):
    """Request model for attendee registration."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone_number: str | None = Field(None, max_length=64)
    title: str | None = Field(None, max_length=255)
    company: str | None = Field(None, max_length=255)
    ticket_type: str = Field(..., min_length=1, max_length=32, description="Ticket type code, e.g. STANDARD")
    discount_code: str | None = Field(None, max_length=64)
    received_at: AwareDatetime | None = Field(
        None,
        description="Receipt timestamp (ISO-8601 with offset); defaults to server time in UTC",
    )

    def to_domain(self) -> AttendeeRegistration:
        return AttendeeRegistration(
            first_name=self.first_name,
            last_name=self.last_name,
            email=str(self.email),
            phone_number=self.phone_number,
            title=self.title,
            company=self.company,
            ticket_type=self.ticket_type,
            discount_code=self.discount_code,
        )


class RegistrationResponse(CamelModel):
    """Response model for a completed registration."""

    ticket_code: str
    ticket_type: str
    pricing_category: str
    base_price: Decimal
    discount_code: str | None = None
    net_price: Decimal
    received_at: datetime


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
