from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from barberzon.core import (
    build_seat_layout,
    can_transition,
    cancellation_fee,
    customer_price,
    first_free_seat,
    haversine_km,
    overlaps,
    partition_bookings,
    platform_fee,
)


def barber(id, seat_number, status="available"):
    return SimpleNamespace(id=id, seat_number=seat_number, status=status)


def test_platform_fee_is_eight_percent_rounded():
    assert platform_fee(5000) == 400
    assert platform_fee(1234) == 99
    assert customer_price(5000) == 5400


def test_overlaps_is_half_open():
    start = datetime(2030, 1, 1, 10, 0)
    end = start + timedelta(minutes=30)
    assert overlaps(start, end, start + timedelta(minutes=15), end + timedelta(minutes=15))
    assert not overlaps(start, end, end, end + timedelta(minutes=30))


def test_partition_bookings_splits_by_status():
    bookings = [
        {"id": 1, "status": "pending"},
        {"id": 2, "status": "completed"},
        {"id": 3, "status": "confirmed"},
        {"id": 4, "status": "cancelled"},
    ]
    upcoming, past = partition_bookings(bookings)
    assert [b["id"] for b in upcoming] == [1, 3]
    assert [b["id"] for b in past] == [2, 4]


def test_partition_bookings_rejects_unknown_status():
    with pytest.raises(ValueError):
        partition_bookings([{"status": "no-show"}])


def test_booking_transitions():
    assert can_transition("pending", "confirmed")
    assert can_transition("confirmed", "completed")
    assert can_transition("pending", "cancelled")
    assert not can_transition("pending", "completed")
    assert not can_transition("completed", "cancelled")
    assert not can_transition("cancelled", "confirmed")


def test_cancellation_fee_only_for_late_customer_cancellations():
    assert cancellation_fee(5400, 1, "customer") == 1080
    assert cancellation_fee(5400, 3, "customer") == 0
    assert cancellation_fee(5400, 1, "barber") == 0


def test_seat_layout_has_exactly_total_seats():
    layout = build_seat_layout(5, [barber(7, 1), barber(8, 4, "busy")])
    assert [s.seat_number for s in layout] == [1, 2, 3, 4, 5]
    # ceil(sqrt(5)) == 3 seats per row
    assert [(s.row, s.col) for s in layout] == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1)]
    assert [s.status for s in layout] == ["available", "empty", "empty", "busy", "empty"]
    assert layout[0].barber_id == 7


def test_seat_layout_ignores_barbers_outside_the_shop():
    layout = build_seat_layout(2, [barber(1, 3), barber(2, None)])
    assert len(layout) == 2
    assert all(s.status == "empty" for s in layout)


def test_seat_layout_empty_shop():
    assert build_seat_layout(0, []) == []


def test_first_free_seat():
    assert first_free_seat(4, [1, 2]) == 3
    assert first_free_seat(2, [1, 2]) is None


def test_haversine_known_distance():
    # Ikeja to Victoria Island, about 21 km
    distance = haversine_km(6.6018, 3.3515, 6.4281, 3.4219)
    assert 18 < distance < 22
    assert haversine_km(6.5, 3.3, 6.5, 3.3) == 0
