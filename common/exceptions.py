"""
Error taxonomy shared by the ordering, payment and ticketing apps.

Every domain failure is a DRF ``APIException`` so views can simply let it
propagate.  Client errors (4xx) keep their specific reason; server-side
failures (5xx) and anything unexpected are logged in full and answered
with a generic message by :func:`exception_handler`.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong"


class TicketingError(APIException):
    """Base class for ordering and payment failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "ticketing_error"


# --- intake validation -----------------------------------------------------

class InvalidTier(TicketingError):
    default_detail = "One or more price tiers do not belong to this event."
    default_code = "invalid_tier"


class GuestInfoRequired(TicketingError):
    default_detail = "Email and name are required for guest checkout."
    default_code = "guest_info_required"


class InvalidPaidOrder(TicketingError):
    default_detail = "A paid order needs at least one item and a positive total."
    default_code = "invalid_paid_order"


class QuantityCapExceeded(TicketingError):
    default_detail = "Too many tickets requested for a guest checkout."
    default_code = "quantity_cap_exceeded"


class EventNotAvailable(TicketingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This event is not open for orders."
    default_code = "event_not_available"


class CapacityExceeded(TicketingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Not enough seats left for this order."
    default_code = "capacity_exceeded"


# --- payment / reconciliation ---------------------------------------------

class PaymentGatewayError(TicketingError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment provider is unavailable."
    default_code = "payment_gateway_error"


class OrphanPayment(TicketingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "No order or transaction matches this payment."
    default_code = "orphan_payment"


# --- fulfilment ------------------------------------------------------------

class SeatLedgerViolation(TicketingError):
    """Confirmed seats would push an event below zero remaining seats."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Seat ledger is inconsistent."
    default_code = "seat_ledger_violation"


def exception_handler(exc, context):
    """
    Project-wide DRF exception handler.

    4xx responses keep DRF's payload plus a machine readable ``code``.
    5xx responses, and exceptions DRF does not know about, are logged with
    their traceback and replaced by a generic message.
    """
    response = drf_exception_handler(exc, context)
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "?"

    if response is None:
        logger.exception("Unhandled error in %s", view_name, exc_info=exc)
        return Response(
            {"detail": GENERIC_ERROR_MESSAGE},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if response.status_code >= 500:
        logger.error("Server error in %s: %r", view_name, exc, exc_info=exc)
        response.data = {"detail": GENERIC_ERROR_MESSAGE}
        return response

    if isinstance(exc, APIException) and isinstance(response.data, dict) and "detail" in response.data:
        codes = exc.get_codes()
        if isinstance(codes, str):
            response.data["code"] = codes
    return response
