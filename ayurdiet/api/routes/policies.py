from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException

from ayurdiet.api.deps import get_current_user, require_permission
from ayurdiet.models.policy import PolicyIn, PolicySearchRequest, PolicyUpdate
from ayurdiet.services import policy_service

router = APIRouter(prefix="/policies", tags=["policies"])


@router.get("/")
def list_policies(user=Depends(get_current_user)):
    return {"items": policy_service.list_policies()}


@router.post("/search")
def search_policies(data: PolicySearchRequest, user=Depends(get_current_user)):
    items = policy_service.search(
        query=data.query,
        category=data.category,
        source=data.source,
        tags=data.tags,
        dosha_type=data.doshaType,
        season=data.season,
        conditions=data.conditions,
        limit=data.limit,
    )
    return {"items": items, "count": len(items)}


DOSHAS = ("vata", "pitta", "kapha")
SEASONS = ("spring", "summer", "monsoon", "autumn", "winter")


@router.get("/category/{category}")
def policies_by_category(category: str, user=Depends(get_current_user)):
    items = policy_service.get_by_category(category)
    return {"items": items, "count": len(items), "category": category}


@router.get("/source/{source}")
def policies_by_source(source: str, user=Depends(get_current_user)):
    items = policy_service.get_by_source(source)
    return {"items": items, "count": len(items), "source": source}


@router.get("/dosha/{dosha}")
def policies_by_dosha(dosha: str, user=Depends(get_current_user)):
    if dosha not in DOSHAS:
        raise HTTPException(status_code=400, detail="Invalid dosha type. Must be vata, pitta, or kapha")
    items = policy_service.get_by_dosha(dosha)
    return {"items": items, "count": len(items), "dosha": dosha}


@router.post("/conditions")
def policies_for_conditions(conditions: List[str] = Body(..., embed=True), user=Depends(get_current_user)):
    if not conditions:
        raise HTTPException(status_code=400, detail="Conditions must be a non-empty array")
    items = policy_service.get_by_conditions(conditions)
    return {"items": items, "count": len(items), "conditions": conditions}


@router.get("/season/{season}")
def seasonal_policies(season: str, user=Depends(get_current_user)):
    if season not in SEASONS:
        raise HTTPException(
            status_code=400, detail="Invalid season. Must be spring, summer, monsoon, autumn, or winter"
        )
    items = policy_service.get_by_season(season)
    return {"items": items, "count": len(items), "season": season}


@router.get("/stats")
def policy_stats(user=Depends(require_permission("canViewAnalytics"))):
    return policy_service.get_stats()


@router.post("/compliance")
def check_compliance(
    dietPlanId: str = Body(...),
    patientId: str = Body(...),
    user=Depends(require_permission("canEditDietPlans")),
):
    return policy_service.check_compliance(dietPlanId, patientId)


@router.get("/{policy_id}")
def get_policy(policy_id: str, user=Depends(get_current_user)):
    policy = policy_service.get_policy(policy_id)
    if policy is None:
        raise HTTPException(status_code=404, detail="Policy not found")
    return policy


@router.post("/", status_code=201)
def create_policy(data: PolicyIn, user=Depends(require_permission("canEditHospitalData"))):
    payload = data.model_dump(exclude_none=True)
    payload["createdBy"] = user["uid"]
    return policy_service.create_policy(payload)


@router.put("/{policy_id}")
def update_policy(policy_id: str, data: PolicyUpdate, user=Depends(require_permission("canEditHospitalData"))):
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    return policy_service.update_policy(policy_id, updates)


@router.delete("/{policy_id}")
def delete_policy(policy_id: str, user=Depends(require_permission("canEditHospitalData"))):
    """Soft delete: the policy stays readable but drops out of searches."""
    policy_service.delete_policy(policy_id)
    return {"message": "Policy deactivated"}
