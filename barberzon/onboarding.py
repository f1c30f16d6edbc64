# barberzon/onboarding.py
"""Step rules shared by the onboarding wizards and the completion endpoint."""

from typing import List, Optional

from pydantic import BaseModel


class BookingPreferences(BaseModel):
    preferred_time: str = ""
    favorite_services: List[str] = []
    notifications: bool = True


class OnboardingForm(BaseModel):
    role: Optional[str] = None  # customer or barber
    full_name: str = ""
    phone_number: str = ""
    profile_image: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    booking_preferences: BookingPreferences = BookingPreferences()

    # barber only
    specialties: List[str] = []
    hourly_rate: Optional[float] = None
    bio: str = ""
    is_new_shop: bool = False
    shop_name: str = ""
    shop_address: str = ""
    shop_phone: str = ""
    selected_shop_id: Optional[int] = None
    join_message: str = ""


class NewShopData(BaseModel):
    name: str = ""
    address: str = ""
    phone_number: str = ""
    email: str = ""
    description: str = ""
    total_seats: int = 4


class BarberOnboardingForm(BaseModel):
    barber_type: Optional[str] = None  # solo or shop
    selected_shop_id: Optional[int] = None
    join_message: str = ""
    new_shop: NewShopData = NewShopData()
    specialties: List[str] = []
    hourly_rate: Optional[float] = None
    experience: str = ""


BARBER_WIZARD_STEPS = 4


def total_steps(role: Optional[str]) -> int:
    return 4 if role == "customer" else 5


def _filled(value: str) -> bool:
    return bool(value and value.strip())


def _has_rate(rate: Optional[float]) -> bool:
    return rate is not None and rate > 0


def can_proceed_from_step(step: int, form: OnboardingForm) -> bool:
    if step == 1:
        return form.role in ("customer", "barber") and _filled(form.full_name) and _filled(form.phone_number)
    if step == 2:
        return True
    if step == 3:
        if form.role == "barber":
            return len(form.specialties) > 0 and _has_rate(form.hourly_rate)
        return True
    if step == 4:
        if form.role == "barber" and form.is_new_shop:
            return _filled(form.shop_name) and _filled(form.shop_address)
        return True
    if step == 5:
        return form.role == "barber"
    return False


def can_proceed_barber_step(step: int, form: BarberOnboardingForm) -> bool:
    if step == 1:
        return form.barber_type in ("solo", "shop")
    if step == 2:
        if form.barber_type == "solo":
            return True
        return form.selected_shop_id is not None or (
            _filled(form.new_shop.name) and _filled(form.new_shop.address)
        )
    if step == 3:
        return len(form.specialties) > 0 and _has_rate(form.hourly_rate)
    if step == 4:
        return True
    return False


def validate_onboarding(form: OnboardingForm) -> Optional[int]:
    """Return the first step whose requirements are not met, or None."""
    for step in range(1, total_steps(form.role) + 1):
        if not can_proceed_from_step(step, form):
            return step
    return None
