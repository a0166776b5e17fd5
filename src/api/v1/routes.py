"""
API v1 routes.

Defines the REST intake endpoint for attendee registrations.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_registration_pipeline
from src.api.models import ErrorResponse, RegistrationRequest, RegistrationResponse
from src.domain.exceptions import InvalidInput, PersistenceFault, ReferenceDataFault
from src.domain.registration import RegistrationPipeline

router = APIRouter(tags=["v1"])


@router.post(
    "/registrations",
    response_model=RegistrationResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid registration data"},
        422: {"description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Pricing reference data misconfigured"},
        503: {"model": ErrorResponse, "description": "Registration could not be stored"},
    },
    summary="Register an attendee",
    description="Resolve the ticket price at receipt time, apply an optional discount code, "
    "issue a unique ticket code and store the ticket. The completed registration is "
    "published to the broker asynchronously.",
)
def register(
    request_data: RegistrationRequest,
    pipeline: RegistrationPipeline = Depends(get_registration_pipeline),
) -> RegistrationResponse:
    """
    Register an attendee and issue a ticket.

    - **ticketType**: ticket type code (e.g. STANDARD)
    - **discountCode**: optional; unknown codes are ignored
    - **receivedAt**: optional receipt timestamp with offset
    """
    received_at = request_data.received_at or datetime.now(timezone.utc)

    try:
        ticket = pipeline.register(received_at, request_data.to_domain())
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except ReferenceDataFault:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Ticket price cannot be determined",
        ) from None
    except PersistenceFault:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Registration could not be completed, please retry",
        ) from None

    return RegistrationResponse(
        ticket_code=ticket.ticket_code,
        ticket_type=ticket.ticket_price.ticket_type.code,
        pricing_category=ticket.ticket_price.pricing_category.code,
        base_price=ticket.ticket_price.base_price,
        discount_code=ticket.discount_code.code if ticket.discount_code else None,
        net_price=ticket.net_price,
        received_at=received_at,
    )
