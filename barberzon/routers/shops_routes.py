# barberzon/routers/shops_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from barberzon.db import get_session
from barberzon.models import Barber, Service
from barberzon.schemas import (
    BarberProfile,
    HoursUpdate,
    SeatSlotPublic,
    ServiceCreate,
    ServicePublic,
    ShopPublic,
    ShopSearchResult,
    ShopUpdate,
)
from barberzon.deps import current_barber, get_shop_or_404, require_shop_owner
from barberzon.core import build_seat_layout
from barberzon.services.shops import resize_seats, search_shops, search_result_public, shop_barbers

router = APIRouter(
    prefix="/shops",
    tags=["shops"],
)


@router.get("", response_model=List[ShopSearchResult])
def list_shops(
    query: Optional[str] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius: Optional[float] = None,
    session: Session = Depends(get_session),
):
    results = search_shops(session, query, lat, lng, radius)
    return [search_result_public(r) for r in results]


@router.get("/{shop_id}", response_model=ShopPublic)
def get_shop(shop_id: int, session: Session = Depends(get_session)):
    return get_shop_or_404(session, shop_id)


@router.get("/{shop_id}/services", response_model=List[ServicePublic])
def get_shop_services(shop_id: int, session: Session = Depends(get_session)):
    get_shop_or_404(session, shop_id)
    return session.exec(select(Service).where(Service.shop_id == shop_id).order_by(Service.name)).all()


@router.post("/{shop_id}/services", response_model=ServicePublic, status_code=201)
def add_shop_service(
    shop_id: int,
    data: ServiceCreate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    shop = get_shop_or_404(session, shop_id)
    require_shop_owner(shop, barber)

    service = Service(shop_id=shop.id, **data.model_dump())
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@router.get("/{shop_id}/barbers", response_model=List[BarberProfile])
def get_shop_barbers(shop_id: int, session: Session = Depends(get_session)):
    get_shop_or_404(session, shop_id)
    return sorted(shop_barbers(session, shop_id), key=lambda b: b.seat_number or 0)


@router.get("/{shop_id}/layout", response_model=List[SeatSlotPublic])
def get_shop_layout(shop_id: int, session: Session = Depends(get_session)):
    shop = get_shop_or_404(session, shop_id)
    return build_seat_layout(shop.total_seats, shop_barbers(session, shop.id))


@router.put("/{shop_id}", response_model=ShopPublic)
def update_shop(
    shop_id: int,
    data: ShopUpdate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    shop = get_shop_or_404(session, shop_id)
    require_shop_owner(shop, barber)

    changes = data.model_dump(exclude_unset=True)
    total_seats = changes.pop("total_seats", None)
    for key, value in changes.items():
        setattr(shop, key, value)
    if total_seats is not None and total_seats != shop.total_seats:
        resize_seats(session, shop, total_seats)

    session.add(shop)
    session.commit()
    session.refresh(shop)
    return shop


@router.put("/{shop_id}/hours", response_model=ShopPublic)
def update_hours(
    shop_id: int,
    data: HoursUpdate,
    session: Session = Depends(get_session),
    barber: Barber = Depends(current_barber),
):
    shop = get_shop_or_404(session, shop_id)
    require_shop_owner(shop, barber)

    shop.opening_hours = data.opening_hours
    session.add(shop)
    session.commit()
    session.refresh(shop)
    return shop
