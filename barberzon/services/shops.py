import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlmodel import Session, select

from ..core import default_opening_hours, haversine_km
from ..models import Barber, JoinRequest, Shop, ShopSeat, User
from ..schemas import ShopCreate
from .notifications import send_notification

logger = logging.getLogger(__name__)


def create_shop_for_owner(session: Session, owner: Barber, data: ShopCreate) -> Shop:
    """Create a shop with seats 1..N and put the owner in seat 1."""
    existing = session.exec(select(Shop).where(Shop.owner_id == owner.id)).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="You already own a barbershop")
    if owner.shop_id is not None and owner.seat_number is not None:
        free_seat(session, owner)

    shop = Shop(
        owner_id=owner.id,
        name=data.name,
        description=data.description,
        address=data.address,
        phone_number=data.phone_number,
        email=data.email,
        total_seats=data.total_seats,
        location_lat=data.location_lat or 0,
        location_lng=data.location_lng or 0,
        opening_hours=data.opening_hours or default_opening_hours(),
    )
    session.add(shop)
    session.flush()  # fills shop.id

    for number in range(1, shop.total_seats + 1):
        session.add(ShopSeat(
            shop_id=shop.id,
            seat_number=number,
            barber_id=owner.id if number == 1 else None,
        ))

    owner.shop_id = shop.id
    owner.is_solo = False
    owner.seat_number = 1
    session.add(owner)
    logger.info("Shop %s created by barber %s with %s seats", shop.id, owner.id, shop.total_seats)
    return shop


def shop_barbers(session: Session, shop_id: int) -> List[Barber]:
    return session.exec(select(Barber).where(Barber.shop_id == shop_id)).all()


def free_seat(session: Session, barber: Barber):
    seat = session.exec(
        select(ShopSeat)
        .where(ShopSeat.shop_id == barber.shop_id)
        .where(ShopSeat.barber_id == barber.id)
    ).first()
    if seat is not None:
        seat.barber_id = None
        session.add(seat)


def assign_seat(session: Session, shop: Shop, barber: Barber, seat_number: int):
    seat = session.exec(
        select(ShopSeat)
        .where(ShopSeat.shop_id == shop.id)
        .where(ShopSeat.seat_number == seat_number)
    ).first()
    if seat is None:
        seat = ShopSeat(shop_id=shop.id, seat_number=seat_number)
    elif seat.barber_id is not None and seat.barber_id != barber.id:
        raise HTTPException(status_code=409, detail=f"Seat {seat_number} is already taken")
    seat.barber_id = barber.id
    session.add(seat)

    barber.shop_id = shop.id
    barber.is_solo = False
    barber.seat_number = seat_number
    session.add(barber)


def resize_seats(session: Session, shop: Shop, total_seats: int):
    seats = session.exec(select(ShopSeat).where(ShopSeat.shop_id == shop.id)).all()
    numbers = {s.seat_number for s in seats}
    for seat in seats:
        if seat.seat_number > total_seats:
            if seat.barber_id is not None:
                raise HTTPException(
                    status_code=409,
                    detail=f"Seat {seat.seat_number} is occupied; move that barber first",
                )
            session.delete(seat)
    for number in range(1, total_seats + 1):
        if number not in numbers:
            session.add(ShopSeat(shop_id=shop.id, seat_number=number))
    shop.total_seats = total_seats
    session.add(shop)


def search_shops(
    session: Session,
    query: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    radius: Optional[float] = None,
) -> List[dict]:
    shops = session.exec(select(Shop)).all()

    if query:
        needle = query.strip().lower()
        shops = [
            s for s in shops
            if needle in s.name.lower() or needle in s.address.lower() or needle in s.description.lower()
        ]

    # Verified shops first, then best rated, then newest
    shops = sorted(shops, key=lambda s: (not s.is_verified, -s.rating, -s.created_at.timestamp()))

    results = []
    for shop in shops:
        occupied = len(shop_barbers(session, shop.id))
        distance = None
        if latitude is not None and longitude is not None and (shop.location_lat or shop.location_lng):
            distance = haversine_km(latitude, longitude, shop.location_lat, shop.location_lng)
        if distance is not None and radius is not None and distance > radius:
            continue
        owner = session.get(Barber, shop.owner_id)
        owner_user = session.get(User, owner.user_id) if owner else None
        results.append({
            "shop": shop,
            "owner": owner_user.full_name if owner_user else "",
            "occupied_seats": occupied,
            "available_seats": max(shop.total_seats - occupied, 0),
            "distance": distance,
        })

    if latitude is not None and longitude is not None:
        # Shops without coordinates go last
        results.sort(key=lambda r: (r["distance"] is None, r["distance"] or 0))
    return results


def search_result_public(result: dict) -> dict:
    shop = result["shop"]
    distance = result["distance"]
    return {
        "id": shop.id,
        "name": shop.name,
        "description": shop.description,
        "address": shop.address,
        "owner": result["owner"],
        "owner_id": shop.owner_id,
        "total_seats": shop.total_seats,
        "available_seats": result["available_seats"],
        "occupied_seats": result["occupied_seats"],
        "rating": shop.rating,
        "total_reviews": shop.total_reviews,
        "distance": f"{distance:.1f}km" if distance is not None else None,
        "images": shop.images,
        "opening_hours": shop.opening_hours,
    }


def submit_join_request(session: Session, barber: Barber, shop_id: int, message: str = "",
                        seat_number: Optional[int] = None) -> JoinRequest:
    if barber.shop_id is not None:
        raise HTTPException(status_code=400, detail="You are already associated with a barbershop")

    shop = session.get(Shop, shop_id)
    if shop is None:
        raise HTTPException(status_code=404, detail="Barbershop not found")

    if len(shop_barbers(session, shop.id)) >= shop.total_seats:
        raise HTTPException(status_code=400, detail="This barbershop is currently full")

    if seat_number is not None and not 1 <= seat_number <= shop.total_seats:
        raise HTTPException(status_code=422, detail="Seat number is outside this shop")

    existing = session.exec(
        select(JoinRequest)
        .where(JoinRequest.barber_id == barber.id)
        .where(JoinRequest.shop_id == shop.id)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="You have already submitted a request to this barbershop")

    join_request = JoinRequest(
        barber_id=barber.id,
        shop_id=shop.id,
        message=message,
        seat_number=seat_number,
    )
    session.add(join_request)
    session.flush()

    barber_user = session.get(User, barber.user_id)
    owner = session.get(Barber, shop.owner_id)
    send_notification(
        session,
        owner.user_id,
        "barber_join_request",
        "New Barber Join Request",
        f'{barber_user.full_name} wants to join your barbershop "{shop.name}"',
        {"request_id": join_request.id, "barber_id": barber.id, "shop_id": shop.id},
    )
    return join_request
