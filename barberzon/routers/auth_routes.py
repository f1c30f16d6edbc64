# barberzon/routers/auth_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from barberzon.db import get_session
from barberzon.models import Barber, User
from barberzon.schemas import AuthResponse, ShopCreate, UserCreate, UserPublic
from barberzon.auth import get_current_user, hash_password, verify_password, token_for
from barberzon.deps import ensure_wallet
from barberzon.onboarding import OnboardingForm, validate_onboarding
from barberzon.services.shops import create_shop_for_owner, submit_join_request

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


def _auth_response(user: User) -> dict:
    return {
        "access_token": token_for(user),
        "token_type": "bearer",
        "user": user,
    }


@router.post("/register", status_code=201, response_model=AuthResponse)
def register(
    data: UserCreate,
    session: Session = Depends(get_session),
):
    # 1) Check if email already exists
    email = data.email.strip().lower()
    existing = session.exec(
        select(User).where(User.email == email)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    # 2) Create user, plus the profile for their role
    user = User(
        email=email,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        phone_number=data.phone_number,
        role=data.role.value if data.role else None,
    )
    session.add(user)
    session.flush()

    if user.role == "barber":
        session.add(Barber(user_id=user.id))
    elif user.role == "customer":
        ensure_wallet(session, user.id)

    session.commit()
    session.refresh(user)
    logger.info("Registered user %s (role=%s)", user.id, user.role)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    email = form_data.username.strip().lower()
    password = form_data.password

    user = session.exec(
        select(User).where(User.email == email)
    ).first()

    if user is None or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return _auth_response(user)


@router.get("/me", response_model=UserPublic)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/onboarding/complete")
def complete_onboarding(
    form: OnboardingForm,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    failed_step = validate_onboarding(form)
    if failed_step is not None:
        raise HTTPException(status_code=422, detail=f"Onboarding step {failed_step} is incomplete")

    user = current_user
    user.role = form.role
    user.completed_onboarding = True
    user.full_name = form.full_name.strip()
    user.phone_number = form.phone_number.strip()
    if form.profile_image is not None:
        user.profile_image = form.profile_image
    if form.location_lat is not None and form.location_lng is not None:
        user.location_lat = form.location_lat
        user.location_lng = form.location_lng
    session.add(user)

    shop = None
    join_request = None
    if form.role == "customer":
        user.booking_preferences = form.booking_preferences.model_dump()
        ensure_wallet(session, user.id)
    else:
        barber = session.exec(select(Barber).where(Barber.user_id == user.id)).first()
        if barber is None:
            barber = Barber(user_id=user.id)
        barber.specialties = list(form.specialties)
        barber.hourly_rate = form.hourly_rate
        barber.bio = form.bio
        session.add(barber)
        session.flush()

        if form.is_new_shop and form.shop_name.strip():
            shop = create_shop_for_owner(session, barber, ShopCreate(
                name=form.shop_name.strip(),
                address=form.shop_address.strip(),
                phone_number=form.shop_phone,
                location_lat=form.location_lat,
                location_lng=form.location_lng,
            ))
        elif form.selected_shop_id is not None:
            barber.is_solo = False
            join_request = submit_join_request(session, barber, form.selected_shop_id, form.join_message)
        else:
            barber.is_solo = True

    session.commit()
    session.refresh(user)
    if shop is not None:
        session.refresh(shop)
    logger.info("User %s completed onboarding as %s", user.id, user.role)

    return {
        "message": "Onboarding completed successfully - shop created" if shop else "Onboarding completed successfully",
        "user": UserPublic.model_validate(user.model_dump()),
        "new_token": token_for(user),
        "shop": shop.model_dump() if shop else None,
        "join_request_id": join_request.id if join_request else None,
    }
