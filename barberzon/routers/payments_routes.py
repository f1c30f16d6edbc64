# barberzon/routers/payments_routes.py

import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session, select

from barberzon.db import get_session
from barberzon.models import Barber, Booking, Transaction, User, Wallet
from barberzon.schemas import (
    FundWalletRequest,
    FundWalletResponse,
    PayBookingRequest,
    PayBookingResponse,
    TransactionPublic,
    VerifyPaymentResponse,
)
from barberzon.auth import get_current_user
from barberzon.config import CURRENCY
from barberzon.deps import get_wallet, get_barber_profile
from barberzon.services.notifications import send_payment_notification
from barberzon.services.paystack import PaystackError, PaystackService, generate_reference, get_paystack

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/payments",
    tags=["payments"],
)

webhook_router = APIRouter(
    prefix="/webhook",
    tags=["payments"],
)


def settle_transaction(session: Session, transaction: Transaction) -> bool:
    """Mark a pending transaction successful; credit deposits once.

    Returns False when the transaction had already been settled.
    """
    if transaction.status == "successful":
        return False

    transaction.status = "successful"
    session.add(transaction)
    if transaction.type == "deposit":
        wallet = session.exec(select(Wallet).where(Wallet.customer_id == transaction.user_id)).first()
        if wallet is not None:
            wallet.balance += transaction.amount
            session.add(wallet)
    send_payment_notification(session, transaction, transaction.user_id)
    logger.info("Transaction %s settled", transaction.reference)
    return True


def _find_transaction(session: Session, reference: str) -> Optional[Transaction]:
    return session.exec(select(Transaction).where(Transaction.reference == reference)).first()


@router.get("/wallet/balance")
def wallet_balance(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if current_user.role == "customer":
        wallet = get_wallet(session, current_user.id)
        return wallet.model_dump()

    # Barbers see their earnings instead
    barber = get_barber_profile(session, current_user)
    completed = session.exec(
        select(Booking)
        .where(Booking.barber_id == barber.id)
        .where(Booking.status == "completed")
        .where(Booking.payment_status == "paid")
    ).all()
    return {
        "total_earnings": sum(b.total_amount - b.platform_fee for b in completed),
        "currency": CURRENCY,
    }


@router.post("/wallet/fund", response_model=FundWalletResponse)
def fund_wallet(
    data: FundWalletRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    paystack: PaystackService = Depends(get_paystack),
):
    if current_user.role != "customer":
        raise HTTPException(status_code=403, detail="Only customers can fund their wallet")
    if data.amount <= 0:
        raise HTTPException(status_code=400, detail="Invalid amount")
    get_wallet(session, current_user.id)

    reference = generate_reference("FUND")
    transaction = Transaction(
        user_id=current_user.id,
        type="deposit",
        amount=data.amount,
        reference=reference,
        payment_method=data.payment_method,
        description="Wallet funding",
    )
    session.add(transaction)
    session.commit()
    session.refresh(transaction)

    try:
        response = paystack.initialize_transaction(
            int(round(data.amount * 100)),  # kobo
            current_user.email,
            reference,
            {"customer_id": current_user.id, "transaction_id": transaction.id, "type": "wallet_funding"},
        )
    except PaystackError:
        transaction.status = "failed"
        session.add(transaction)
        session.commit()
        raise HTTPException(status_code=502, detail="Payment gateway unavailable")

    gateway = response.get("data") or {}
    return {
        "authorization_url": gateway.get("authorization_url", ""),
        "access_code": gateway.get("access_code", ""),
        "reference": gateway.get("reference", reference),
        "transaction": transaction,
    }


@router.post("/booking/pay", response_model=PayBookingResponse)
def pay_for_booking(
    data: PayBookingRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if current_user.role != "customer":
        raise HTTPException(status_code=403, detail="Only customers can pay for bookings")

    booking = session.get(Booking, data.booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    if booking.customer_id != current_user.id:
        raise HTTPException(status_code=403, detail="You are not authorized to pay for this booking")
    if booking.payment_status != "pending":
        raise HTTPException(status_code=409, detail=f"Booking is already {booking.payment_status}")
    if booking.status == "cancelled":
        raise HTTPException(status_code=409, detail="Booking is cancelled")

    wallet = get_wallet(session, current_user.id)
    if wallet.balance < booking.total_amount:
        raise HTTPException(status_code=400, detail="Insufficient wallet balance")

    wallet.balance -= booking.total_amount
    booking.payment_status = "paid"
    transaction = Transaction(
        user_id=current_user.id,
        type="payment",
        amount=booking.total_amount,
        reference=generate_reference("PAY"),
        status="successful",
        payment_method=data.payment_method,
        description=f"Payment for booking #{booking.id}",
    )
    session.add(wallet)
    session.add(booking)
    session.add(transaction)
    session.flush()

    barber = session.get(Barber, booking.barber_id)
    send_payment_notification(session, transaction, current_user.id)
    send_payment_notification(session, transaction, barber.user_id)

    session.commit()
    session.refresh(booking)
    session.refresh(transaction)
    session.refresh(wallet)
    return {"booking": booking, "transaction": transaction, "wallet": wallet}


@router.get("/transactions", response_model=List[TransactionPublic])
def transaction_history(
    type: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    stmt = select(Transaction).where(Transaction.user_id == current_user.id)
    if type:
        stmt = stmt.where(Transaction.type == type)
    stmt = stmt.order_by(Transaction.created_at.desc()).offset((max(page, 1) - 1) * limit).limit(limit)
    return session.exec(stmt).all()


@router.get("/verify/{reference}", response_model=VerifyPaymentResponse)
def verify_payment(
    reference: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    paystack: PaystackService = Depends(get_paystack),
):
    transaction = _find_transaction(session, reference)
    if transaction is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    if transaction.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="You are not authorized to verify this payment")
    if transaction.status == "successful":
        return {"message": "Payment already verified", "transaction": transaction}

    try:
        result = paystack.verify_transaction(reference)
    except PaystackError:
        raise HTTPException(status_code=502, detail="Payment gateway unavailable")

    if not result.get("status") or (result.get("data") or {}).get("status") != "success":
        transaction.status = "failed"
        session.add(transaction)
        session.commit()
        raise HTTPException(status_code=400, detail="Payment verification failed")

    settle_transaction(session, transaction)
    session.commit()
    session.refresh(transaction)
    return {"message": "Payment verified successfully", "transaction": transaction}


@webhook_router.post("/paystack")
async def paystack_webhook(
    request: Request,
    session: Session = Depends(get_session),
    paystack: PaystackService = Depends(get_paystack),
):
    payload = await request.body()
    signature = request.headers.get("x-paystack-signature")
    if not paystack.verify_webhook_signature(signature, payload):
        logger.warning("Rejected Paystack webhook with invalid signature")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        event = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning("Rejected Paystack webhook with a malformed body")
        raise HTTPException(status_code=400, detail="Invalid payload")

    event_type = event.get("event")
    if event_type == "charge.success":
        reference = (event.get("data") or {}).get("reference")
        transaction = _find_transaction(session, reference) if reference else None
        if transaction is None:
            logger.error("Transaction not found for reference: %s", reference)
        elif settle_transaction(session, transaction):
            session.commit()
    else:
        logger.info("Unhandled webhook event: %s", event_type)

    return {"received": True}
