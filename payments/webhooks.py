"""
FedaPay webhook endpoint.

FedaPay posts an event whose ``entity`` is the transaction that changed.
The endpoint authenticates the delivery (when a webhook secret is
configured), extracts the transaction id and hands it to the reconciler.
The HTTP status tells FedaPay whether a retry is useful: 2xx when the
delivery was applied or deliberately ignored, 404 for a reference we do
not know yet, 502 when the status could not be re-verified.
"""
from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time

from django.conf import settings
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework import views

from common.exceptions import OrphanPayment, PaymentGatewayError

from .reconciliation import reconcile_payment

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-FEDAPAY-SIGNATURE"
SIGNATURE_TOLERANCE = 300


def _parse_signature_header(header: str) -> tuple[str | None, list[str]]:
    timestamp, signatures = None, []
    for part in header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "s":
            signatures.append(value)
    return timestamp, signatures


def verify_webhook_signature(request, secret: str | None = None, tolerance: int = SIGNATURE_TOLERANCE) -> bool:
    """
    Check the ``X-FEDAPAY-SIGNATURE`` header (``t=<ts>,s=<hex>``).

    The signature is an HMAC-SHA256 of ``"<ts>.<raw body>"`` keyed with the
    webhook secret.  Without a configured secret every delivery passes and
    the reconciler's re-verification is the only gate.
    """
    secret = secret if secret is not None else settings.FEDAPAY_WEBHOOK_SECRET
    if not secret:
        return True

    header = request.headers.get(SIGNATURE_HEADER)
    if not header:
        return False
    timestamp, signatures = _parse_signature_header(header)
    if not timestamp or not signatures:
        return False
    try:
        if abs(time.time() - int(timestamp)) > tolerance:
            return False
    except ValueError:
        return False

    signed = f"{timestamp}.".encode("utf-8") + request.body
    expected = hmac.new(key=secret.encode("utf-8"), msg=signed, digestmod=hashlib.sha256).hexdigest()
    return any(hmac.compare_digest(expected, sig) for sig in signatures)


@method_decorator(csrf_exempt, name="dispatch")
class FedaPayWebhookView(views.APIView):
    """Receive FedaPay transaction events."""

    authentication_classes = []
    permission_classes = []  # signature + re-verification only
    throttle_classes = []

    def post(self, request):
        if not verify_webhook_signature(request):
            logger.warning("Rejected FedaPay webhook with an invalid signature")
            return JsonResponse({"ok": False}, status=400)

        try:
            payload = json.loads(request.body or b"{}")
        except ValueError:
            logger.warning("Rejected FedaPay webhook with an unreadable body")
            return JsonResponse({"ok": False}, status=400)
        if not isinstance(payload, dict):
            return JsonResponse({"ok": False}, status=400)

        if payload.get("object") != "transaction":
            logger.info("Ignoring FedaPay webhook for object %r", payload.get("object"))
            return JsonResponse({"ok": True})

        entity = payload.get("entity") or {}
        txn_id = entity.get("id") if isinstance(entity, dict) else None
        if not txn_id:
            logger.warning("FedaPay webhook %r has no transaction id", payload.get("name"))
            return JsonResponse({"ok": False}, status=400)

        try:
            reconcile_payment(str(txn_id))
        except OrphanPayment:
            return JsonResponse({"ok": False}, status=404)
        except PaymentGatewayError:
            logger.error("Could not re-verify FedaPay transaction %s", txn_id)
            return JsonResponse({"ok": False}, status=502)
        return JsonResponse({"ok": True})
