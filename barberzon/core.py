# barberzon/core.py

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from .config import (
    PLATFORM_FEE_RATE,
    CANCELLATION_FEE_RATE,
    CANCELLATION_FEE_WINDOW_HOURS,
)

BARBER_STATUSES = ("available", "busy", "break", "offline")
SEAT_STATUSES = BARBER_STATUSES + ("empty",)

BOOKING_STATUSES = ("pending", "confirmed", "completed", "cancelled")
UPCOMING_STATUSES = ("pending", "confirmed")
PAST_STATUSES = ("completed", "cancelled")

# status -> statuses it may move to
BOOKING_TRANSITIONS = {
    "pending": ("confirmed", "cancelled"),
    "confirmed": ("completed", "cancelled"),
    "completed": (),
    "cancelled": (),
}


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and b_start < a_end


def platform_fee(amount: float) -> int:
    return round(amount * PLATFORM_FEE_RATE)


def customer_price(hourly_rate: float) -> float:
    """Price shown to customers: the barber's rate plus the platform fee."""
    return hourly_rate + platform_fee(hourly_rate)


def booking_bucket(status: str) -> str:
    if status in UPCOMING_STATUSES:
        return "upcoming"
    if status in PAST_STATUSES:
        return "past"
    raise ValueError(f"Unknown booking status: {status!r}")


def partition_bookings(bookings: Iterable) -> Tuple[list, list]:
    """Split bookings into (upcoming, past).

    Works on model instances and on plain dicts, as returned by the API.
    """
    upcoming, past = [], []
    for booking in bookings:
        status = booking["status"] if isinstance(booking, dict) else booking.status
        if booking_bucket(status) == "upcoming":
            upcoming.append(booking)
        else:
            past.append(booking)
    return upcoming, past


def can_transition(current: str, target: str) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, ())


def cancellation_fee(total_amount: float, hours_until: float, cancelled_by: str) -> float:
    # Late cancellations by the customer are charged
    if cancelled_by == "customer" and hours_until < CANCELLATION_FEE_WINDOW_HOURS:
        return round(total_amount * CANCELLATION_FEE_RATE, 2)
    return 0


@dataclass
class SeatSlot:
    seat_number: int
    row: int
    col: int
    barber_id: Optional[int]
    status: str


def build_seat_layout(total_seats: int, barbers: Iterable) -> List[SeatSlot]:
    """Arrange a shop's seats on a near-square grid.

    Always yields exactly ``total_seats`` slots. A seat with no barber is
    "empty"; barbers whose seat number falls outside the shop are ignored.
    """
    if total_seats <= 0:
        return []

    by_seat = {}
    for barber in barbers:
        seat = barber.seat_number
        if seat is not None and 1 <= seat <= total_seats and seat not in by_seat:
            by_seat[seat] = barber

    seats_per_row = math.ceil(math.sqrt(total_seats))
    layout = []
    for number in range(1, total_seats + 1):
        barber = by_seat.get(number)
        status = barber.status if barber is not None and barber.status in BARBER_STATUSES else "empty"
        layout.append(
            SeatSlot(
                seat_number=number,
                row=(number - 1) // seats_per_row,
                col=(number - 1) % seats_per_row,
                barber_id=barber.id if barber is not None else None,
                status=status,
            )
        )
    return layout


def first_free_seat(total_seats: int, occupied: Iterable[int]) -> Optional[int]:
    taken = set(occupied)
    for number in range(1, total_seats + 1):
        if number not in taken:
            return number
    return None


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    r = 6371  # Earth's radius in kilometers
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return r * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def default_opening_hours() -> dict:
    hours = {
        day: {"open": "09:00", "close": "18:00", "closed": False}
        for day in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")
    }
    hours["sunday"] = {"open": "10:00", "close": "16:00", "closed": False}
    return hours
