# barberzon/routers/notifications_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlmodel import Session, select

from barberzon.db import get_session
from barberzon.models import Notification, PushToken, User
from barberzon.schemas import NotificationPublic, PushTokenCreate, PushTokenDelete
from barberzon.auth import get_current_user

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


@router.get("", response_model=List[NotificationPublic])
def list_notifications(
    page: int = 1,
    limit: int = 20,
    read: Optional[bool] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    stmt = select(Notification).where(Notification.user_id == current_user.id)
    if read is not None:
        stmt = stmt.where(Notification.is_read == read)
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
    stmt = stmt.offset((max(page, 1) - 1) * limit).limit(limit)
    return session.exec(stmt).all()


@router.get("/unread-count")
def unread_count(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    count = session.exec(
        select(func.count(Notification.id))
        .where(Notification.user_id == current_user.id)
        .where(Notification.is_read == False)  # noqa: E712
    ).one()
    return {"count": count}


@router.patch("/read-all")
def mark_all_read(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    unread = session.exec(
        select(Notification)
        .where(Notification.user_id == current_user.id)
        .where(Notification.is_read == False)  # noqa: E712
    ).all()
    for notification in unread:
        notification.is_read = True
        session.add(notification)
    session.commit()
    return {"updated": len(unread)}


@router.patch("/{notification_id}/read", response_model=NotificationPublic)
def mark_read(
    notification_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    notification = session.get(Notification, notification_id)
    if notification is None or notification.user_id != current_user.id:
        raise HTTPException(status_code=404, detail="Notification not found")

    notification.is_read = True
    session.add(notification)
    session.commit()
    session.refresh(notification)
    return notification


@router.post("/push-token", status_code=201)
def register_push_token(
    data: PushTokenCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    existing = session.exec(
        select(PushToken)
        .where(PushToken.user_id == current_user.id)
        .where(PushToken.token == data.token)
    ).first()
    if existing is None:
        session.add(PushToken(user_id=current_user.id, token=data.token, platform=data.platform.value))
        session.commit()
    return {"token": data.token, "registered": True}


@router.delete("/push-token")
def unregister_push_token(
    data: PushTokenDelete,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    tokens = session.exec(
        select(PushToken)
        .where(PushToken.user_id == current_user.id)
        .where(PushToken.token == data.token)
    ).all()
    for token in tokens:
        session.delete(token)
    session.commit()
    return {"token": data.token, "registered": False}
