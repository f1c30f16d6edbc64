# barberzon/routers/barbers_routes.py

import logging
from datetime import datetime, timedelta, date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barberzon.db import get_session
from barberzon.models import Barber, Booking, User
from barberzon.schemas import (
    AppointmentStatusUpdate,
    BarberProfile,
    BarberProfileUpdate,
    BarberPublic,
    BarberStatusUpdate,
    BookingPublic,
    EarningsResponse,
)
from barberzon.auth import get_current_user
from barberzon.deps import current_barber
from barberzon.core import platform_fee, customer_price
from barberzon.routers.bookings_routes import apply_transition
from barberzon.services.shops import free_seat

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)

EARNINGS_PERIODS = {
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}


@router.get("/profile", response_model=BarberProfile)
def get_profile(barber: Barber = Depends(current_barber)):
    return barber


@router.put("/profile", response_model=BarberProfile)
def update_profile(
    data: BarberProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    barber: Barber = Depends(current_barber),
):
    if data.specialties is not None:
        barber.specialties = list(data.specialties)
    if data.hourly_rate is not None:
        barber.hourly_rate = data.hourly_rate
    if data.bio is not None:
        barber.bio = data.bio
    if data.experience is not None:
        barber.experience = data.experience
    if data.is_solo is not None:
        if data.is_solo and barber.shop_id is not None:
            # Solo barbers never hold a seat
            free_seat(session, barber)
            barber.shop_id = None
            barber.seat_number = None
        barber.is_solo = data.is_solo
    if data.completed_onboarding is not None:
        current_user.completed_onboarding = data.completed_onboarding
        session.add(current_user)

    session.add(barber)
    session.commit()
    session.refresh(barber)
    return barber


@router.patch("/status", response_model=BarberProfile)
def update_status(
    data: BarberStatusUpdate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    barber.status = data.status.value
    barber.is_available = data.status.value == "available"
    session.add(barber)
    session.commit()
    session.refresh(barber)
    logger.info("Barber %s status updated to %s", barber.id, barber.status)
    return barber


@router.get("/appointments", response_model=List[BookingPublic])
def list_appointments(
    status: Optional[str] = None,
    on_date: Optional[date] = None,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    stmt = select(Booking).where(Booking.barber_id == barber.id)

    if on_date is not None:
        day_start_dt = datetime.combine(on_date, datetime.min.time())
        day_end_dt = day_start_dt + timedelta(days=1)
        stmt = stmt.where(Booking.booking_date >= day_start_dt).where(Booking.booking_date < day_end_dt)

    if status is not None and status != "all":
        stmt = stmt.where(Booking.status == status)

    stmt = stmt.order_by(Booking.booking_date)
    return session.exec(stmt).all()


@router.patch("/appointments/{booking_id}/status", response_model=BookingPublic)
def update_appointment_status(
    booking_id: int,
    data: AppointmentStatusUpdate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    booking = session.get(Booking, booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    if booking.barber_id != barber.id:
        raise HTTPException(status_code=403, detail="You are not authorized to update this booking")
    if data.status == "cancelled":
        raise HTTPException(status_code=422, detail="Use the cancel endpoint to cancel a booking")

    apply_transition(session, booking, data.status, data.notes)
    session.commit()
    session.refresh(booking)
    return booking


@router.get("/earnings", response_model=EarningsResponse)
def get_earnings(
    period: str = "week",
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    if period not in EARNINGS_PERIODS:
        raise HTTPException(status_code=422, detail="period must be 'day', 'week', 'month', or 'year'")
    since = datetime.now() - EARNINGS_PERIODS[period]

    bookings = session.exec(
        select(Booking)
        .where(Booking.barber_id == barber.id)
        .where(Booking.status == "completed")
        .where(Booking.payment_status == "paid")
        .where(Booking.booking_date >= since)
    ).all()

    gross = sum(b.total_amount for b in bookings)
    fees = sum(b.platform_fee for b in bookings)
    return {
        "period": period,
        "since": since,
        "total_bookings": len(bookings),
        "gross": gross,
        "platform_fees": fees,
        "net": gross - fees,
    }


@router.get("/{barber_id}", response_model=BarberPublic)
def get_barber(
    barber_id: int,
    session: Session = Depends(get_session),
):
    barber = session.get(Barber, barber_id)
    if barber is None:
        raise HTTPException(status_code=404, detail="Barber not found")
    user = session.get(User, barber.user_id)
    return {
        **barber.model_dump(),
        "full_name": user.full_name,
        "profile_image": user.profile_image,
        "price": customer_price(barber.hourly_rate),
        "platform_fee": platform_fee(barber.hourly_rate),
    }
