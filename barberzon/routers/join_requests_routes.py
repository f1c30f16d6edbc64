# barberzon/routers/join_requests_routes.py

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barberzon.db import get_session
from barberzon.models import Barber, JoinRequest, Shop
from barberzon.schemas import (
    JoinRequestCreate,
    JoinRequestPublic,
    JoinRequestRespond,
    ShopCreate,
    ShopPublic,
    ShopSearchResult,
)
from barberzon.deps import current_barber
from barberzon.core import first_free_seat
from barberzon.config import DEFAULT_SEARCH_RADIUS_KM
from barberzon.services.notifications import send_notification
from barberzon.services.shops import (
    assign_seat,
    create_shop_for_owner,
    search_shops as find_shops,
    search_result_public,
    shop_barbers,
    submit_join_request,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/barber-requests",
    tags=["barber-requests"],
)


@router.get("/shops/search", response_model=List[ShopSearchResult])
def search_shops(
    query: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    radius: float = DEFAULT_SEARCH_RADIUS_KM,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    results = find_shops(session, query, latitude, longitude, radius)
    return [search_result_public(r) for r in results]


@router.post("/shops", response_model=ShopPublic, status_code=201)
def create_shop(
    data: ShopCreate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    shop = create_shop_for_owner(session, barber, data)
    session.commit()
    session.refresh(shop)
    return shop


@router.post("/submit", response_model=JoinRequestPublic, status_code=201)
def submit(
    data: JoinRequestCreate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    join_request = submit_join_request(session, barber, data.shop_id, data.message, data.seat_number)
    session.commit()
    session.refresh(join_request)
    return join_request


@router.get("/incoming", response_model=List[JoinRequestPublic])
def incoming_requests(
    status: Optional[str] = None,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    shop_ids = session.exec(select(Shop.id).where(Shop.owner_id == barber.id)).all()
    if not shop_ids:
        raise HTTPException(status_code=403, detail="You do not own any barbershops")

    stmt = select(JoinRequest).where(JoinRequest.shop_id.in_(shop_ids))
    if status:
        stmt = stmt.where(JoinRequest.status == status)
    stmt = stmt.order_by(JoinRequest.created_at.desc())
    return session.exec(stmt).all()


@router.put("/{request_id}/respond", response_model=JoinRequestPublic)
def respond(
    request_id: int,
    data: JoinRequestRespond,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    join_request = session.get(JoinRequest, request_id)
    if join_request is None:
        raise HTTPException(status_code=404, detail="Join request not found")

    shop = session.get(Shop, join_request.shop_id)
    if shop.owner_id != barber.id:
        raise HTTPException(status_code=403, detail="You can only respond to requests for your own barbershops")
    if join_request.status != "pending":
        raise HTTPException(status_code=400, detail="This request has already been processed")

    applicant = session.get(Barber, join_request.barber_id)

    if data.action.value == "approve":
        if applicant.shop_id is not None:
            raise HTTPException(status_code=409, detail="Barber has already joined a barbershop")

        members = shop_barbers(session, shop.id)
        if len(members) >= shop.total_seats:
            raise HTTPException(status_code=400, detail="Barbershop is currently full")

        seat_number = data.seat_number or join_request.seat_number
        if seat_number is None:
            seat_number = first_free_seat(shop.total_seats, [b.seat_number for b in members if b.seat_number])
        if not 1 <= seat_number <= shop.total_seats:
            raise HTTPException(status_code=422, detail="Seat number is outside this shop")
        if any(b.seat_number == seat_number for b in members):
            raise HTTPException(status_code=409, detail=f"Seat {seat_number} is already taken")

        assign_seat(session, shop, applicant, seat_number)
        join_request.status = "approved"
        join_request.seat_number = seat_number
        send_notification(
            session,
            applicant.user_id,
            "join_request_approved",
            "Join Request Approved!",
            f'Your request to join "{shop.name}" has been approved. '
            f"You've been assigned seat {seat_number}.",
            {"shop_id": shop.id, "seat_number": seat_number},
        )
    else:
        join_request.status = "rejected"
        send_notification(
            session,
            applicant.user_id,
            "join_request_rejected",
            "Join Request Declined",
            f'Your request to join "{shop.name}" has been declined.',
            {"shop_id": shop.id},
        )

    join_request.updated_at = datetime.now()
    session.add(join_request)
    session.commit()
    session.refresh(join_request)
    logger.info("Join request %s %s by barber %s", join_request.id, join_request.status, barber.id)
    return join_request


@router.get("/my-requests", response_model=List[JoinRequestPublic])
def my_requests(
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    return session.exec(
        select(JoinRequest)
        .where(JoinRequest.barber_id == barber.id)
        .order_by(JoinRequest.created_at.desc())
    ).all()
