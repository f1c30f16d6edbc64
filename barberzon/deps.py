# barberzon/deps.py

from fastapi import Depends, HTTPException
from sqlmodel import Session, select

from .auth import get_current_user
from .db import get_session
from .models import Barber, Shop, User, Wallet


def require_role(user: User, role: str):
    if user.role != role:
        raise HTTPException(status_code=403, detail="Forbidden")


def get_barber_profile(session: Session, user: User) -> Barber:
    barber = session.exec(select(Barber).where(Barber.user_id == user.id)).first()
    if barber is None:
        raise HTTPException(status_code=404, detail="Barber profile not found")
    return barber


def current_barber(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Barber:
    require_role(current_user, "barber")
    return get_barber_profile(session, current_user)


def get_wallet(session: Session, customer_id: int) -> Wallet:
    wallet = session.exec(select(Wallet).where(Wallet.customer_id == customer_id)).first()
    if wallet is None:
        raise HTTPException(status_code=404, detail="Wallet not found")
    return wallet


def ensure_wallet(session: Session, customer_id: int) -> Wallet:
    wallet = session.exec(select(Wallet).where(Wallet.customer_id == customer_id)).first()
    if wallet is None:
        wallet = Wallet(customer_id=customer_id)
        session.add(wallet)
    return wallet


def get_shop_or_404(session: Session, shop_id: int) -> Shop:
    shop = session.get(Shop, shop_id)
    if shop is None:
        raise HTTPException(status_code=404, detail="Shop not found")
    return shop


def require_shop_owner(shop: Shop, barber: Barber):
    if shop.owner_id != barber.id:
        raise HTTPException(status_code=403, detail="Only the shop owner can do this")
