import logging
import uuid

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from taskhub.auth.tokens import decode_access_token
from taskhub.db import get_db
from taskhub.errors import Unauthenticated
from taskhub.models.user import User

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)

def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if creds is None or creds.scheme.lower() != "bearer":
        raise Unauthenticated("missing bearer token", "MISSING_TOKEN")

    try:
        payload = decode_access_token(creds.credentials)
        user_id = uuid.UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
        logger.info("rejected access token: %s", e.__class__.__name__)
        raise Unauthenticated("invalid or expired token", "INVALID_TOKEN")

    user = db.get(User, user_id)
    if user is None:
        raise Unauthenticated("user not found", "USER_NOT_FOUND")

    return user
