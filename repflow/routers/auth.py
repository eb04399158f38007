from fastapi import APIRouter, Depends, HTTPException, Response
from sqlmodel import Session as DBSession, select

from ..db import get_session
from ..models import User
from ..schemas import RegisterIn, LoginIn, UserRead
from ..auth import (
    hash_pw,
    verify_pw,
    make_token,
    get_current_user,
    set_session_cookie,
    clear_session_cookie,
)
from ..services.common import Conflict, normalize_whitespace

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=201)
def register(payload: RegisterIn, response: Response, db: DBSession = Depends(get_session)):
    email = payload.email.lower().strip()
    if not payload.password or len(payload.password) < 6:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters")

    exists = db.exec(select(User).where(User.email == email)).first()
    if exists:
        raise Conflict("Email already registered")

    u = User(email=email, name=normalize_whitespace(payload.name), password_hash=hash_pw(payload.password))
    db.add(u)
    db.commit()
    db.refresh(u)

    # auto-login on register
    set_session_cookie(response, make_token(u.id))
    return u


@router.post("/login", response_model=UserRead)
def login(payload: LoginIn, response: Response, db: DBSession = Depends(get_session)):
    email = payload.email.lower().strip()
    u = db.exec(select(User).where(User.email == email)).first()
    if not u or not verify_pw(payload.password, u.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    set_session_cookie(response, make_token(u.id))
    return u


@router.post("/logout")
def logout(response: Response):
    clear_session_cookie(response)
    return {"ok": True}


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)):
    return user
