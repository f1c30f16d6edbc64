# barberzon/models.py

from typing import Optional, List
from datetime import datetime

from sqlalchemy import DateTime, UniqueConstraint
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

# All timestamps are stored as naive local time


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    full_name: str = ""
    phone_number: str = ""
    profile_image: Optional[str] = None
    role: Optional[str] = None  # customer or barber, set during onboarding
    completed_onboarding: bool = False
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    booking_preferences: dict = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True, unique=True)

    specialties: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    hourly_rate: float = 0
    bio: str = ""
    experience: str = ""
    rating: float = 0
    total_reviews: int = 0
    status: str = "available"  # available, busy, break, offline
    is_available: bool = True
    is_solo: bool = True
    shop_id: Optional[int] = Field(default=None, index=True)
    seat_number: Optional[int] = None


class Shop(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="barber.id", index=True)

    name: str
    description: str = ""
    address: str = ""
    phone_number: str = ""
    email: str = ""
    location_lat: float = 0
    location_lng: float = 0
    total_seats: int = 4
    opening_hours: dict = Field(default_factory=dict, sa_column=Column(JSON))
    rating: float = 0
    total_reviews: int = 0
    is_verified: bool = False
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)


class ShopSeat(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("shop_id", "seat_number", name="uq_shop_seat"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    shop_id: int = Field(foreign_key="shop.id", index=True)
    seat_number: int
    barber_id: Optional[int] = Field(default=None, foreign_key="barber.id")


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    shop_id: int = Field(foreign_key="shop.id", index=True)
    name: str
    price: float
    duration_minutes: int = 30


class JoinRequest(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("barber_id", "shop_id", name="uq_barber_shop_request"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    shop_id: int = Field(foreign_key="shop.id", index=True)
    message: str = ""
    seat_number: Optional[int] = None
    status: str = "pending"  # pending, approved, rejected
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)


class Booking(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="user.id", index=True)
    barber_id: int = Field(foreign_key="barber.id", index=True)
    shop_id: Optional[int] = Field(default=None, foreign_key="shop.id")

    services: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    booking_date: datetime = Field(index=True, sa_type=DateTime)
    start_time: datetime = Field(sa_type=DateTime)
    end_time: datetime = Field(sa_type=DateTime)
    status: str = "pending"  # pending, confirmed, completed, cancelled
    payment_status: str = "pending"  # pending, paid, refunded
    subtotal: float = 0
    platform_fee: float = 0
    total_amount: float = 0
    notes: str = ""
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)


class Review(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    booking_id: int = Field(foreign_key="booking.id", unique=True)
    customer_id: int = Field(foreign_key="user.id")
    barber_id: int = Field(foreign_key="barber.id", index=True)
    rating: int
    comment: str = ""
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)


class Wallet(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="user.id", unique=True)
    balance: float = 0
    currency: str = "NGN"


class Transaction(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    type: str  # deposit, withdrawal, payment, refund
    amount: float
    reference: str = Field(index=True, unique=True)
    status: str = "pending"  # pending, successful, failed
    payment_method: str = "card"
    description: str = ""
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)


class Notification(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    type: str
    title: str
    message: str
    is_read: bool = False
    data: dict = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)


class PushToken(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    token: str = Field(index=True)
    platform: str  # ios, android, web


class FavoriteShop(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("customer_id", "shop_id", name="uq_favorite_shop"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="user.id", index=True)
    shop_id: int = Field(foreign_key="shop.id")
