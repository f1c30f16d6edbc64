"""Customer bookings view: upcoming/past lists, cancel and rate."""

import logging
from typing import Callable, List, Optional

from ..core import partition_bookings
from .api import ApiError
from .services import BookingService, CustomerService

logger = logging.getLogger(__name__)


def log_notifier(message: str):
    logger.warning(message)


class BookingsView:
    def __init__(
        self,
        customers: CustomerService,
        bookings: BookingService,
        notify: Callable[[str], None] = log_notifier,
    ):
        self.customers = customers
        self.bookings = bookings
        self.notify = notify
        self.items: List[dict] = []
        self.loaded = False

    @property
    def upcoming(self) -> List[dict]:
        return partition_bookings(self.items)[0]

    @property
    def past(self) -> List[dict]:
        return partition_bookings(self.items)[1]

    def find(self, booking_id) -> Optional[dict]:
        for booking in self.items:
            if booking["id"] == booking_id:
                return booking
        return None

    def load(self) -> bool:
        try:
            self.items = self.customers.get_bookings()
        except ApiError as exc:
            self.notify(f"Failed to load bookings: {exc.message}")
            return False
        self.loaded = True
        return True

    def cancel(self, booking_id, reason: str = "", confirm: Optional[Callable[[], bool]] = None) -> bool:
        """Cancel a booking after the user confirms, then reload the list."""
        if confirm is not None and not confirm():
            return False
        try:
            self.bookings.cancel_booking(booking_id, reason or None)
        except ApiError as exc:
            self.notify(f"Failed to cancel booking: {exc.message}")
            return False
        return self.load()

    def rate(self, booking_id, rating: int, comment: str = "") -> bool:
        booking = self.find(booking_id)
        if booking is None or booking["status"] != "completed":
            self.notify("Only completed bookings can be rated")
            return False
        if not 1 <= rating <= 5:
            self.notify("Rating must be between 1 and 5")
            return False
        try:
            self.bookings.rate_booking(booking_id, rating, comment)
        except ApiError as exc:
            self.notify(f"Failed to rate booking: {exc.message}")
            return False
        return self.load()
