# barberzon/schemas.py

from pydantic import BaseModel, Field, field_validator
from enum import Enum
from datetime import datetime
from typing import List, Optional


class UserRole(str, Enum):
    customer = "customer"
    barber = "barber"


class BarberStatus(str, Enum):
    available = "available"
    busy = "busy"
    break_ = "break"
    offline = "offline"


class JoinAction(str, Enum):
    approve = "approve"
    reject = "reject"


class Platform(str, Enum):
    ios = "ios"
    android = "android"
    web = "web"


# --- users ---

class UserPublic(BaseModel):
    id: int
    email: str
    full_name: str
    phone_number: str
    profile_image: Optional[str] = None
    role: Optional[UserRole] = None
    completed_onboarding: bool = False
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    booking_preferences: dict = {}


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    full_name: str = ""
    phone_number: str = ""
    role: Optional[UserRole] = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AuthResponse(Token):
    user: UserPublic


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    profile_image: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    booking_preferences: Optional[dict] = None


# --- barbers ---

class BarberProfile(BaseModel):
    id: int
    user_id: int
    specialties: List[str]
    hourly_rate: float
    bio: str
    experience: str
    rating: float
    total_reviews: int
    status: BarberStatus
    is_available: bool
    is_solo: bool
    shop_id: Optional[int] = None
    seat_number: Optional[int] = None


class BarberPublic(BarberProfile):
    full_name: str
    profile_image: Optional[str] = None
    price: float
    platform_fee: float


class BarberProfileUpdate(BaseModel):
    specialties: Optional[List[str]] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    bio: Optional[str] = None
    experience: Optional[str] = None
    is_solo: Optional[bool] = None
    completed_onboarding: Optional[bool] = None


class BarberStatusUpdate(BaseModel):
    status: BarberStatus


class EarningsResponse(BaseModel):
    period: str
    since: datetime
    total_bookings: int
    gross: float
    platform_fees: float
    net: float
    currency: str = "NGN"


# --- shops ---

class ShopCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    address: str = ""
    phone_number: str = ""
    email: str = ""
    total_seats: int = Field(default=4, ge=1, le=50)
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    opening_hours: Optional[dict] = None


class ShopUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    total_seats: Optional[int] = Field(default=None, ge=1, le=50)
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    images: Optional[List[str]] = None


class HoursUpdate(BaseModel):
    opening_hours: dict


class ShopPublic(BaseModel):
    id: int
    owner_id: int
    name: str
    description: str
    address: str
    phone_number: str
    email: str
    location_lat: float
    location_lng: float
    total_seats: int
    opening_hours: dict
    rating: float
    total_reviews: int
    is_verified: bool
    images: List[str]


class ShopSearchResult(BaseModel):
    id: int
    name: str
    description: str
    address: str
    owner: str
    owner_id: int
    total_seats: int
    available_seats: int
    occupied_seats: int
    rating: float
    total_reviews: int
    distance: Optional[str] = None
    images: List[str]
    opening_hours: dict


class SeatSlotPublic(BaseModel):
    seat_number: int
    row: int
    col: int
    barber_id: Optional[int] = None
    status: str


class ServiceCreate(BaseModel):
    name: str
    price: float = Field(gt=0)
    duration_minutes: int = Field(default=30, gt=0)


class ServicePublic(BaseModel):
    id: int
    shop_id: int
    name: str
    price: float
    duration_minutes: int


# --- join requests ---

class JoinRequestCreate(BaseModel):
    shop_id: int
    message: str = ""
    seat_number: Optional[int] = None


class JoinRequestRespond(BaseModel):
    action: JoinAction
    seat_number: Optional[int] = None


class JoinRequestPublic(BaseModel):
    id: int
    barber_id: int
    shop_id: int
    message: str
    seat_number: Optional[int] = None
    status: str
    created_at: datetime
    updated_at: datetime


# --- bookings ---

class BookingServiceItem(BaseModel):
    name: str
    price: float = Field(ge=0)


class BookingCreate(BaseModel):
    barber_id: int
    shop_id: Optional[int] = None
    services: List[BookingServiceItem] = []
    booking_date: datetime
    notes: str = ""

    @field_validator("booking_date")
    @classmethod
    def to_local_time(cls, value: datetime) -> datetime:
        # Offsets such as "Z" become the server's naive local time
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value


class BookingPublic(BaseModel):
    id: int
    customer_id: int
    barber_id: int
    shop_id: Optional[int] = None
    services: List[dict]
    booking_date: datetime
    start_time: datetime
    end_time: datetime
    status: str
    payment_status: str
    subtotal: float
    platform_fee: float
    total_amount: float
    notes: str


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class CancelResponse(BaseModel):
    booking: BookingPublic
    cancellation_fee: float


class CompleteRequest(BaseModel):
    notes: Optional[str] = None


class AppointmentStatusUpdate(BaseModel):
    status: str
    notes: Optional[str] = None


class RatingCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str = ""


class ReviewPublic(BaseModel):
    id: int
    booking_id: int
    customer_id: int
    barber_id: int
    rating: int
    comment: str


# --- payments ---

class WalletPublic(BaseModel):
    id: int
    customer_id: int
    balance: float
    currency: str


class TransactionPublic(BaseModel):
    id: int
    user_id: int
    type: str
    amount: float
    reference: str
    status: str
    payment_method: str
    description: str
    created_at: datetime


class WalletWithTransactions(WalletPublic):
    transactions: List[TransactionPublic]


class FundWalletRequest(BaseModel):
    amount: float
    payment_method: str = "card"


class FundWalletResponse(BaseModel):
    authorization_url: str
    access_code: str
    reference: str
    transaction: TransactionPublic


class PayBookingRequest(BaseModel):
    booking_id: int
    payment_method: str = "wallet"


class PayBookingResponse(BaseModel):
    booking: BookingPublic
    transaction: TransactionPublic
    wallet: WalletPublic


class VerifyPaymentResponse(BaseModel):
    message: str
    transaction: TransactionPublic


# --- notifications ---

class NotificationPublic(BaseModel):
    id: int
    user_id: int
    type: str
    title: str
    message: str
    is_read: bool
    data: dict
    created_at: datetime


class PushTokenCreate(BaseModel):
    token: str
    platform: Platform


class PushTokenDelete(BaseModel):
    token: str


class FavoriteCreate(BaseModel):
    shop_id: int
