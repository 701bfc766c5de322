import re

import bcrypt

from taskhub.config import settings

# 8+ chars, at least one lower, one upper, one digit
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}$")

PASSWORD_RULE = (
    "password must be at least 8 characters and contain an uppercase letter, "
    "a lowercase letter and a digit"
)

def is_strong_password(password: str) -> bool:
    return PASSWORD_RE.match(password) is not None

def hash_password(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8")[:72], salt).decode("utf-8")

def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:72], password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
