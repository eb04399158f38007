from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..auth import get_current_user
from ..models import User
from ..schemas import CatalogPage
from ..services.adapters import exercise_catalog

router = APIRouter(prefix="/api/external", tags=["external"])


@router.get("/muscles")
async def list_muscles(user: User = Depends(get_current_user)):
    """Muscle names present in the catalog, for filter chips in the browser."""
    catalog = await exercise_catalog.load_catalog()
    return exercise_catalog.muscles(catalog)


@router.get("/exercises", response_model=CatalogPage)
async def browse_exercises(
    q: Optional[str] = Query(None, description="Name query, e.g. 'leg press'"),
    muscle: Optional[str] = Query(None, description="Primary or secondary muscle, e.g. 'quadriceps'"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
):
    """
    Token-AND name search over the exercise catalog. An empty catalog (upstream
    unavailable) yields an empty page rather than an error.
    """
    catalog = await exercise_catalog.load_catalog()
    items = exercise_catalog.search(catalog, q=q, muscle=muscle, limit=limit, offset=offset)
    next_offset = offset + limit if len(items) == limit else None
    return CatalogPage(items=items, limit=limit, offset=offset, next_offset=next_offset)
