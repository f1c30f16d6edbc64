# barberzon/routers/bookings_routes.py

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barberzon.db import get_session
from barberzon.models import Barber, Booking, Review, Shop, Transaction, User
from barberzon.schemas import (
    BookingCreate,
    BookingPublic,
    CancelRequest,
    CancelResponse,
    CompleteRequest,
    RatingCreate,
    ReviewPublic,
)
from barberzon.auth import get_current_user
from barberzon.config import SERVICE_SLOT_MINUTES
from barberzon.deps import require_role, current_barber, get_wallet
from barberzon.core import overlaps, platform_fee, can_transition, cancellation_fee, UPCOMING_STATUSES
from barberzon.services.notifications import send_booking_notification, send_payment_notification
from barberzon.services.paystack import generate_reference

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


def apply_transition(session: Session, booking: Booking, target: str, notes: Optional[str] = None):
    """Move a booking to ``target`` and notify the customer."""
    if not can_transition(booking.status, target):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot move a {booking.status} booking to {target}",
        )
    booking.status = target
    if notes:
        booking.notes = notes
    # Unpaid bookings completed in the shop are settled there
    if target == "completed" and booking.payment_status == "pending":
        booking.payment_status = "paid"
    session.add(booking)
    send_booking_notification(session, booking, booking.customer_id, target)
    logger.info("Booking %s moved to %s", booking.id, target)


def _get_booking_for(session: Session, booking_id: int, user: User) -> Booking:
    booking = session.get(Booking, booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")

    if user.role == "customer" and booking.customer_id == user.id:
        return booking
    if user.role == "barber":
        barber = session.exec(select(Barber).where(Barber.user_id == user.id)).first()
        if barber is not None and booking.barber_id == barber.id:
            return booking
    raise HTTPException(status_code=403, detail="You are not authorized to access this booking")


@router.post("", response_model=BookingPublic, status_code=201)
def create_booking(
    data: BookingCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    require_role(current_user, "customer")

    # 1) Barber and shop
    barber = session.get(Barber, data.barber_id)
    if barber is None:
        raise HTTPException(status_code=404, detail="Barber not found")

    if data.shop_id is not None:
        shop = session.get(Shop, data.shop_id)
        if shop is None:
            raise HTTPException(status_code=404, detail="Shop not found")
        if barber.shop_id != shop.id:
            raise HTTPException(status_code=400, detail="Barber does not belong to this shop")

    if not barber.is_available:
        raise HTTPException(status_code=400, detail="Barber is not available for bookings")

    # 2) Prevent booking in the past (naive local time)
    start = data.booking_date
    if start < datetime.now():
        raise HTTPException(status_code=422, detail="Booking date and time must be in the future")

    # 3) Build interval, 30 minutes per service
    duration = SERVICE_SLOT_MINUTES * max(len(data.services), 1)
    end = start + timedelta(minutes=duration)

    # 4) Reject overlaps with the barber's active bookings that day
    day_start_dt = datetime.combine(start.date(), datetime.min.time())
    active = session.exec(
        select(Booking)
        .where(Booking.barber_id == barber.id)
        .where(Booking.start_time >= day_start_dt - timedelta(days=1))
        .where(Booking.start_time < day_start_dt + timedelta(days=2))
    ).all()
    for b in active:
        if b.status not in UPCOMING_STATUSES:
            continue
        if overlaps(start, end, b.start_time, b.end_time):
            raise HTTPException(status_code=409, detail="Barber is already booked at this time")

    # 5) Price
    if data.services:
        subtotal = sum(s.price for s in data.services)
    else:
        subtotal = barber.hourly_rate
    fee = platform_fee(subtotal)

    booking = Booking(
        customer_id=current_user.id,
        barber_id=barber.id,
        shop_id=data.shop_id if data.shop_id is not None else barber.shop_id,
        services=[s.model_dump() for s in data.services],
        booking_date=start,
        start_time=start,
        end_time=end,
        subtotal=subtotal,
        platform_fee=fee,
        total_amount=subtotal + fee,
        notes=data.notes,
    )
    session.add(booking)
    session.flush()

    barber_user_id = barber.user_id
    send_booking_notification(session, booking, barber_user_id, "created")
    session.commit()
    session.refresh(booking)
    logger.info("Booking %s created for barber %s", booking.id, barber.id)
    return booking


@router.get("/{booking_id}", response_model=BookingPublic)
def get_booking(
    booking_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return _get_booking_for(session, booking_id, current_user)


@router.patch("/{booking_id}/cancel", response_model=CancelResponse)
def cancel_booking(
    booking_id: int,
    data: Optional[CancelRequest] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    booking = _get_booking_for(session, booking_id, current_user)

    if not can_transition(booking.status, "cancelled"):
        raise HTTPException(status_code=409, detail=f"Booking is already {booking.status}")

    hours_until = (booking.booking_date - datetime.now()).total_seconds() / 3600
    fee = cancellation_fee(booking.total_amount, hours_until, current_user.role)

    reason = data.reason if data is not None and data.reason else None
    booking.status = "cancelled"
    booking.notes = f"Cancelled: {reason}" if reason else "Cancelled: No reason provided"

    if booking.payment_status == "paid":
        refund_amount = booking.total_amount - fee
        wallet = get_wallet(session, booking.customer_id)
        wallet.balance += refund_amount
        refund = Transaction(
            user_id=booking.customer_id,
            type="refund",
            amount=refund_amount,
            reference=generate_reference("REF"),
            status="successful",
            payment_method="wallet",
            description=f"Refund for booking #{booking.id}",
        )
        booking.payment_status = "refunded"
        session.add(wallet)
        session.add(refund)
        session.flush()
        send_payment_notification(session, refund, booking.customer_id)

    session.add(booking)

    barber = session.get(Barber, booking.barber_id)
    send_booking_notification(session, booking, booking.customer_id, "cancelled")
    if barber.user_id != current_user.id:
        send_booking_notification(session, booking, barber.user_id, "cancelled")

    session.commit()
    session.refresh(booking)
    logger.info("Booking %s cancelled by user %s (fee=%s)", booking.id, current_user.id, fee)
    return {"booking": booking, "cancellation_fee": fee}


@router.patch("/{booking_id}/confirm", response_model=BookingPublic)
def confirm_booking(
    booking_id: int,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    booking = session.get(Booking, booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    if booking.barber_id != barber.id:
        raise HTTPException(status_code=403, detail="You are not authorized to update this booking")

    apply_transition(session, booking, "confirmed")
    session.commit()
    session.refresh(booking)
    return booking


@router.patch("/{booking_id}/complete", response_model=BookingPublic)
def complete_booking(
    booking_id: int,
    data: Optional[CompleteRequest] = None,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    booking = session.get(Booking, booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    if booking.barber_id != barber.id:
        raise HTTPException(status_code=403, detail="You are not authorized to update this booking")

    apply_transition(session, booking, "completed", data.notes if data is not None else None)
    session.commit()
    session.refresh(booking)
    return booking


@router.post("/{booking_id}/rate", response_model=ReviewPublic)
def rate_booking(
    booking_id: int,
    data: RatingCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    require_role(current_user, "customer")
    booking = session.get(Booking, booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    if booking.customer_id != current_user.id:
        raise HTTPException(status_code=403, detail="You are not authorized to rate this booking")
    if booking.status != "completed":
        raise HTTPException(status_code=400, detail="Only completed bookings can be rated")

    review = session.exec(select(Review).where(Review.booking_id == booking.id)).first()
    if review is None:
        review = Review(
            booking_id=booking.id,
            customer_id=current_user.id,
            barber_id=booking.barber_id,
            rating=data.rating,
            comment=data.comment,
        )
    else:
        review.rating = data.rating
        review.comment = data.comment
    session.add(review)
    session.flush()

    # Recompute the barber's average
    ratings = session.exec(select(Review.rating).where(Review.barber_id == booking.barber_id)).all()
    barber = session.get(Barber, booking.barber_id)
    barber.total_reviews = len(ratings)
    barber.rating = sum(ratings) / len(ratings) if ratings else 0
    session.add(barber)

    session.commit()
    session.refresh(review)
    return review
