from fastapi import APIRouter, Depends
from sqlmodel import Session as DBSession


from ..db import get_session
from ..auth import get_current_user
from ..models import User
from ..schemas import SetCreate, SetUpdate, SetRead
from ..services import sets_service as svc
from ..services.common import parse_id


router = APIRouter(prefix="/api/sets", tags=["sets"])


def set_id_param(set_id: str) -> int:
    return parse_id(set_id, "set")


@router.post("", response_model=SetRead, status_code=201)
def create_set(
    payload: SetCreate,
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.create_set(db=db, user_id=user.id, payload=payload)


@router.get("/{set_id}", response_model=SetRead)
def get_set(
    set_id: int = Depends(set_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.get_set(db=db, user_id=user.id, set_id=set_id)


@router.put("/{set_id}", response_model=SetRead)
def update_set(
    payload: SetUpdate,
    set_id: int = Depends(set_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.update_set(db=db, user_id=user.id, set_id=set_id, payload=payload)


@router.delete("/{set_id}", status_code=204)
def delete_set(
    set_id: int = Depends(set_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    svc.delete_set(db=db, user_id=user.id, set_id=set_id)
    return None


@router.post("/{set_id}/complete", response_model=SetRead)
def complete_set(
    set_id: int = Depends(set_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.complete_set(db=db, user_id=user.id, set_id=set_id)
