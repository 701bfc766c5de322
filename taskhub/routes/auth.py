from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskhub.auth.deps import get_current_user
from taskhub.auth.passwords import hash_password, verify_password
from taskhub.auth.tokens import issue_access_token
from taskhub.config import settings
from taskhub.db import get_db
from taskhub.errors import Conflict, Unauthenticated, ValidationFailed
from taskhub.models.user import User
from taskhub.ratelimit import rate_limit
from taskhub.schemas.auth import AuthOut, LoginIn, PasswordUpdateIn, ProfileUpdateIn, RegisterIn
from taskhub.schemas.common import UserOut, user_out

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

def _find_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email.lower().strip()))

@router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterIn,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit("auth:register", limit_per_window=settings.rate_limit_register_per_min)),
) -> AuthOut:
    email = payload.email.lower().strip()
    if _find_by_email(db, email) is not None:
        raise Conflict("a user with this email already exists", "EMAIL_ALREADY_EXISTS")

    user = User(email=email, password_hash=hash_password(payload.password), name=payload.name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("a user with this email already exists", "EMAIL_ALREADY_EXISTS")
    db.refresh(user)

    logger.info("registered user %s", user.id)
    return AuthOut(user=user_out(user), access_token=issue_access_token(user.id, user.email))

@router.post("/login", response_model=AuthOut)
def login(
    payload: LoginIn,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit("auth:login", limit_per_window=settings.rate_limit_login_per_min)),
) -> AuthOut:
    user = _find_by_email(db, payload.email)
    # same answer for unknown email and wrong password
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("failed login for %s", payload.email.lower())
        raise Unauthenticated("invalid email or password", "INVALID_CREDENTIALS")

    return AuthOut(user=user_out(user), access_token=issue_access_token(user.id, user.email))

@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)) -> UserOut:
    return user_out(user)

@router.put("/me", response_model=UserOut)
def update_profile(
    payload: ProfileUpdateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserOut:
    if payload.email is not None:
        email = payload.email.lower().strip()
        if email != user.email:
            if _find_by_email(db, email) is not None:
                raise Conflict("a user with this email already exists", "EMAIL_ALREADY_EXISTS")
            user.email = email

    if payload.name is not None:
        user.name = payload.name

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with another account taking the same email
        db.rollback()
        raise Conflict("a user with this email already exists", "EMAIL_ALREADY_EXISTS")
    db.refresh(user)
    return user_out(user)

@router.put("/me/password")
def update_password(
    payload: PasswordUpdateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    if payload.current_password == payload.new_password:
        raise ValidationFailed(
            [{"field": "new_password", "message": "new password must differ from the current one"}]
        )

    if not verify_password(payload.current_password, user.password_hash):
        raise Unauthenticated("current password is incorrect", "INVALID_CURRENT_PASSWORD")

    user.password_hash = hash_password(payload.new_password)
    db.add(user)
    db.commit()
    logger.info("password changed for user %s", user.id)
    return {"updated": True}
