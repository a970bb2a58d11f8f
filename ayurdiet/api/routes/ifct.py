"""IFCT 2017 nutrient table lookups (read-only reference data)."""

from fastapi import APIRouter, Depends, HTTPException

from ayurdiet.api.deps import get_current_user
from ayurdiet.services import ifct_service

router = APIRouter(prefix="/ifct", tags=["ifct"])

MAX_RESULTS = 50


def _page(foods, limit: int):
    limit = max(1, min(limit, MAX_RESULTS))
    return foods[:limit]


def _unavailable(exc: ifct_service.IFCTUnavailable):
    return HTTPException(status_code=503, detail=str(exc))


@router.get("/search")
def search_foods(query: str = "", limit: int = 10, user=Depends(get_current_user)):
    query = query.strip()
    if len(query) < 2:
        raise HTTPException(status_code=400, detail="Query must be at least 2 characters")
    try:
        foods = ifct_service.find_food(query)
    except ifct_service.IFCTUnavailable as exc:
        raise _unavailable(exc)

    items = _page(foods, limit)
    return {"items": items, "count": len(items), "total": len(foods), "query": query}


@router.get("/nutrient")
def foods_by_nutrient(nutrient: str, min: float, max: float, limit: int = 10, user=Depends(get_current_user)):
    if min > max:
        raise HTTPException(status_code=400, detail="Min value cannot be greater than max value")
    try:
        foods = ifct_service.find_by_nutrient(nutrient, min, max)
    except ifct_service.IFCTUnavailable as exc:
        raise _unavailable(exc)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    items = _page(foods, limit)
    return {
        "items": items,
        "count": len(items),
        "total": len(foods),
        "nutrient": nutrient,
        "range": {"min": min, "max": max},
    }


@router.get("/{code}")
def food_by_code(code: str, user=Depends(get_current_user)):
    try:
        food = ifct_service.find_by_code(code)
    except ifct_service.IFCTUnavailable as exc:
        raise _unavailable(exc)
    if food is None:
        raise HTTPException(status_code=404, detail="Food not found")
    return food
