import logging

from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, ValidationError

from common.exceptions import (
    CapacityExceeded,
    GENERIC_ERROR_MESSAGE,
    PaymentGatewayError,
    SeatLedgerViolation,
    exception_handler,
)

CONTEXT = {"view": None}


def test_client_errors_keep_reason_and_code():
    response = exception_handler(CapacityExceeded(), CONTEXT)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.data == {"detail": CapacityExceeded.default_detail, "code": "capacity_exceeded"}


def test_drf_errors_pass_through():
    response = exception_handler(NotAuthenticated(), CONTEXT)
    assert response.status_code == 401
    assert response.data["code"] == "not_authenticated"

    response = exception_handler(ValidationError({"email": ["Enter a valid email address."]}), CONTEXT)
    assert response.status_code == 400
    assert response.data == {"email": ["Enter a valid email address."]}


def test_server_errors_are_normalized(caplog):
    for exc in (PaymentGatewayError("FedaPay POST /v1/transactions failed"), SeatLedgerViolation("event 3 has 0 left")):
        with caplog.at_level(logging.ERROR, logger="common.exceptions"):
            response = exception_handler(exc, CONTEXT)
        assert response.status_code >= 500
        assert response.data == {"detail": GENERIC_ERROR_MESSAGE}
    assert "FedaPay POST" in caplog.text


def test_unexpected_exceptions_become_generic_500(caplog):
    with caplog.at_level(logging.ERROR, logger="common.exceptions"):
        response = exception_handler(KeyError("secret internals"), CONTEXT)

    assert response.status_code == 500
    assert response.data == {"detail": GENERIC_ERROR_MESSAGE}
    assert "secret internals" not in str(response.data)
    assert any(r.exc_info for r in caplog.records)
