import logging
from typing import Optional

from sqlmodel import Session

from ..models import Booking, Notification, Transaction

logger = logging.getLogger(__name__)

BOOKING_MESSAGES = {
    "created": ("New Booking", "You have a new booking request for {when}."),
    "confirmed": ("Booking Confirmed", "Your booking for {when} has been confirmed."),
    "completed": ("Booking Completed", "Your booking for {when} has been completed. Leave a rating!"),
    "cancelled": ("Booking Cancelled", "The booking for {when} has been cancelled."),
    "updated": ("Booking Updated", "The booking for {when} has been updated."),
}


def send_notification(
    session: Session,
    user_id: int,
    type: str,
    title: str,
    message: str,
    data: Optional[dict] = None,
) -> Notification:
    """Queue a notification on the session; the caller commits."""
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data or {},
    )
    session.add(notification)
    logger.info("Notification %r queued for user %s", type, user_id)
    return notification


def send_booking_notification(session: Session, booking: Booking, recipient_id: int, action: str) -> Notification:
    title, template = BOOKING_MESSAGES[action]
    when = booking.booking_date.strftime("%d %b %Y %H:%M")
    return send_notification(
        session,
        recipient_id,
        f"booking_{action}",
        title,
        template.format(when=when),
        {"booking_id": booking.id, "status": booking.status},
    )


def send_payment_notification(session: Session, transaction: Transaction, recipient_id: int) -> Notification:
    if transaction.type == "deposit":
        title, message = "Wallet Funded", f"Your wallet was credited with NGN {transaction.amount:,.2f}."
    elif transaction.type == "refund":
        title, message = "Refund Issued", f"NGN {transaction.amount:,.2f} was refunded to your wallet."
    else:
        title, message = "Payment Received", f"A payment of NGN {transaction.amount:,.2f} was processed."
    return send_notification(
        session,
        recipient_id,
        f"payment_{transaction.type}",
        title,
        message,
        {"transaction_id": transaction.id, "reference": transaction.reference},
    )
