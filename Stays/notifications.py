"""Owner notifications for new stay requests."""

import logging
from typing import Any, Optional, Protocol

import httpx

from config import Config
from Stays.booking import Booking
from utils import format_date_range

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, booking: Booking) -> None:
        ...


class NullNotifier:
    """Notifier used when no delivery channel is wanted."""

    def notify(self, booking: Booking) -> None:
        return None


class EmailJSNotifier:
    """
    Send the owner an email through the EmailJS REST API.

    Delivery is best effort: a missing configuration is logged and skipped,
    transport failures are raised to the caller, which decides whether the
    failure matters.
    """

    def __init__(
        self,
        service_id: Optional[str] = Config.EMAILJS_SERVICE_ID,
        template_id: Optional[str] = Config.EMAILJS_TEMPLATE_ID,
        public_key: Optional[str] = Config.EMAILJS_PUBLIC_KEY,
        api_url: str = Config.EMAILJS_API_URL,
        timeout: float = Config.NOTIFY_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.service_id = service_id
        self.template_id = template_id
        self.public_key = public_key
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.service_id and self.template_id and self.public_key)

    def build_payload(self, booking: Booking) -> dict[str, Any]:
        return {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.public_key,
            "template_params": {
                "guest_name": booking.guest_name,
                "guest_email": booking.guest_email,
                "guest_count": booking.guest_count,
                "dates": format_date_range(booking.start_key, booking.end_key),
                "notes": booking.notes or "None",
            },
        }

    def notify(self, booking: Booking) -> None:
        if not self.configured:
            logger.info("EmailJS not configured; skipping notification", extra={"booking_id": str(booking.id)})
            return

        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.post(self.api_url, json=self.build_payload(booking))
            response.raise_for_status()
        logger.info("Email notification sent", extra={"booking_id": str(booking.id)})
