"""Paystack API client for payment processing."""

import hashlib
import hmac
import logging
import random
import time
from typing import Any, Optional

import httpx

from .. import config

logger = logging.getLogger(__name__)


class PaystackError(Exception):
    """Raised when the Paystack API cannot be reached or rejects a call"""

    pass


def generate_reference(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{random.randint(0, 999999)}"


class PaystackService:
    """Service for interacting with the Paystack API"""

    def __init__(self, secret_key: str = None, base_url: str = None, timeout: float = 15.0):
        self.secret_key = secret_key if secret_key is not None else config.PAYSTACK_SECRET_KEY
        self.base_url = (base_url or config.PAYSTACK_BASE_URL).rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout) as client:
                response = client.request(method, path, headers=self._headers(), **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            logger.error("Paystack %s %s failed: %s", method, path, e)
            raise PaystackError(str(e)) from e

    def initialize_transaction(
        self,
        amount_kobo: int,
        email: str,
        reference: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> dict[str, Any]:
        """Initialize a payment. Amount is in kobo (Naira * 100)."""
        return self._request(
            "POST",
            "/transaction/initialize",
            json={
                "amount": amount_kobo,
                "email": email,
                "reference": reference or generate_reference("PSK"),
                "metadata": metadata or {},
                "callback_url": f"{config.FRONTEND_URL}/payment/callback",
            },
        )

    def verify_transaction(self, reference: str) -> dict[str, Any]:
        return self._request("GET", f"/transaction/verify/{reference}")

    def verify_webhook_signature(self, signature: Optional[str], payload: bytes) -> bool:
        """Check the x-paystack-signature header (HMAC-SHA512 of the raw body)."""
        if not signature or not self.secret_key:
            return False
        expected = hmac.new(self.secret_key.encode("utf-8"), payload, hashlib.sha512).hexdigest()
        return hmac.compare_digest(expected, signature)


def get_paystack() -> PaystackService:
    return PaystackService()
