# barberzon/routers/customers_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barberzon.db import get_session
from barberzon.models import Booking, FavoriteShop, Transaction, User
from barberzon.schemas import (
    BookingPublic,
    FavoriteCreate,
    ProfileUpdate,
    UserPublic,
    WalletWithTransactions,
)
from barberzon.auth import get_current_user
from barberzon.deps import require_role, get_wallet, get_shop_or_404
from barberzon.core import BOOKING_STATUSES, UPCOMING_STATUSES, PAST_STATUSES

router = APIRouter(
    prefix="/customers",
    tags=["customers"],
)

BOOKING_FILTERS = {
    "upcoming": UPCOMING_STATUSES,
    "past": PAST_STATUSES,
}


def current_customer(current_user: User = Depends(get_current_user)) -> User:
    require_role(current_user, "customer")
    return current_user


@router.get("/profile", response_model=UserPublic)
def get_profile(customer: User = Depends(current_customer)):
    return customer


@router.put("/profile", response_model=UserPublic)
def update_profile(
    data: ProfileUpdate,
    session: Session = Depends(get_session),
    customer: User = Depends(current_customer),
):
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(customer, key, value)
    session.add(customer)
    session.commit()
    session.refresh(customer)
    return customer


@router.get("/bookings", response_model=List[BookingPublic])
def list_bookings(
    status: Optional[str] = "all",
    session: Session = Depends(get_session),
    customer: User = Depends(current_customer),
):
    stmt = select(Booking).where(Booking.customer_id == customer.id)

    if status in BOOKING_FILTERS:
        stmt = stmt.where(Booking.status.in_(BOOKING_FILTERS[status]))
    elif status in BOOKING_STATUSES:
        stmt = stmt.where(Booking.status == status)
    elif status not in (None, "all"):
        raise HTTPException(status_code=422, detail="Unknown booking status filter")

    stmt = stmt.order_by(Booking.booking_date)
    return session.exec(stmt).all()


@router.post("/favorites", status_code=201)
def add_favorite(
    data: FavoriteCreate,
    session: Session = Depends(get_session),
    customer: User = Depends(current_customer),
):
    get_shop_or_404(session, data.shop_id)
    existing = session.exec(
        select(FavoriteShop)
        .where(FavoriteShop.customer_id == customer.id)
        .where(FavoriteShop.shop_id == data.shop_id)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Shop is already a favorite")

    session.add(FavoriteShop(customer_id=customer.id, shop_id=data.shop_id))
    session.commit()
    return {"shop_id": data.shop_id, "favorite": True}


@router.delete("/favorites/{shop_id}")
def remove_favorite(
    shop_id: int,
    session: Session = Depends(get_session),
    customer: User = Depends(current_customer),
):
    favorite = session.exec(
        select(FavoriteShop)
        .where(FavoriteShop.customer_id == customer.id)
        .where(FavoriteShop.shop_id == shop_id)
    ).first()
    if favorite is None:
        raise HTTPException(status_code=404, detail="Favorite not found")

    session.delete(favorite)
    session.commit()
    return {"shop_id": shop_id, "favorite": False}


@router.get("/favorites", response_model=List[int])
def list_favorites(
    session: Session = Depends(get_session),
    customer: User = Depends(current_customer),
):
    return session.exec(select(FavoriteShop.shop_id).where(FavoriteShop.customer_id == customer.id)).all()


@router.get("/wallet", response_model=WalletWithTransactions)
def get_wallet_summary(
    session: Session = Depends(get_session),
    customer: User = Depends(current_customer),
):
    wallet = get_wallet(session, customer.id)
    transactions = session.exec(
        select(Transaction)
        .where(Transaction.user_id == customer.id)
        .order_by(Transaction.created_at.desc())
        .limit(10)
    ).all()
    return {**wallet.model_dump(), "transactions": transactions}
