import os
from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException, Request, Response
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlmodel import Session as DBSession

from .db import get_session
from .models import User

# ---- cookie config (use SAME values for set & delete) ----
SESSION_COOKIE   = "session"
COOKIE_PATH      = "/"
COOKIE_DOMAIN    = os.getenv("COOKIE_DOMAIN") or None
COOKIE_SAMESITE  = "lax"
COOKIE_SECURE    = os.getenv("COOKIE_SECURE", "false").lower() == "true"

# ---- token config ----
JWT_SECRET = os.getenv("JWT_SECRET", "CHANGE_ME_to_a_long_random_secret")
JWT_ALG    = "HS256"
JWT_TTL    = timedelta(hours=int(os.getenv("JWT_TTL_HOURS", "12")))

# ---- password hashing ----
pwd_ctx = CryptContext(schemes=["argon2"], deprecated="auto")

def hash_pw(p: str) -> str:
    return pwd_ctx.hash(p)

def verify_pw(p: str, h: str) -> bool:
    return pwd_ctx.verify(p, h)

# ---- JWT helpers ----
def make_token(user_id: int) -> str:
    now = datetime.now(tz=timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + JWT_TTL).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)

def read_token(token: str) -> int:
    try:
        data = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
        return int(data.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

# ---- cookie helpers ----
def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        samesite=COOKIE_SAMESITE,
        secure=COOKIE_SECURE,
        path=COOKIE_PATH,
        domain=COOKIE_DOMAIN,
        max_age=int(JWT_TTL.total_seconds()),
    )

def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE,
        path=COOKIE_PATH,
        domain=COOKIE_DOMAIN,
    )

# ---- dependencies ----
def get_current_user(request: Request, db: DBSession = Depends(get_session)) -> User:
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    user_id = read_token(token)
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user
