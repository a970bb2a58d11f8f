"""
AYUSH policy documents (``policies``).

Category, source and dosha filters run in Firestore; free text, tags,
conditions and season are matched in memory on the returned page.
Deleting a policy only clears ``isActive``.
"""
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional

from ayurdiet.services import firestore_store as store
from ayurdiet.services.logger import get_logger
from ayurdiet.services.time_utils import to_datetime, utcnow

logger = get_logger(__name__)

COLLECTION = "policies"
ACTIVE = ("isActive", "==", True)
RECENT_DAYS = 30


def list_policies() -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION)


def get_policy(policy_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(COLLECTION, policy_id)


def get_by_category(category: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("category", "==", category), ACTIVE])


def get_by_source(source: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("source", "==", source), ACTIVE])


def get_by_dosha(dosha: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [(f"doshaRelevance.{dosha}", "==", True), ACTIVE])


def _matches_conditions(policy: Dict[str, Any], conditions: Iterable[str]) -> bool:
    applicable = [c.lower() for c in policy.get("applicableConditions") or []]
    return any(cond.lower() in pc for cond in conditions for pc in applicable)


def get_by_conditions(conditions: List[str]) -> List[Dict[str, Any]]:
    return [p for p in store.get_all(COLLECTION, [ACTIVE]) if _matches_conditions(p, conditions)]


def get_by_season(season: str) -> List[Dict[str, Any]]:
    return [p for p in store.get_all(COLLECTION, [ACTIVE]) if season in (p.get("seasonalRelevance") or [])]


def search(
    query: Optional[str] = None,
    category: Optional[str] = None,
    source: Optional[str] = None,
    tags: Optional[List[str]] = None,
    dosha_type: Optional[str] = None,
    season: Optional[str] = None,
    conditions: Optional[List[str]] = None,
    limit: int = 50,
) -> List[Dict[str, Any]]:
    filters = [ACTIVE]
    if category:
        filters.append(("category", "==", category))
    if source:
        filters.append(("source", "==", source))
    if dosha_type:
        filters.append((f"doshaRelevance.{dosha_type}", "==", True))

    policies = store.get_all(COLLECTION, filters, limit=limit or 50)

    if query:
        needle = query.lower()
        policies = [
            p for p in policies
            if needle in (p.get("title") or "").lower()
            or needle in (p.get("summary") or "").lower()
            or needle in (p.get("fullContent") or "").lower()
            or any(needle in t.lower() for t in p.get("tags") or [])
        ]
    if tags:
        policies = [p for p in policies if any(t in (p.get("tags") or []) for t in tags)]
    if conditions:
        policies = [p for p in policies if _matches_conditions(p, conditions)]
    if season:
        policies = [p for p in policies if season in (p.get("seasonalRelevance") or [])]
    return policies


def create_policy(data: Dict[str, Any]) -> Dict[str, Any]:
    return store.create(COLLECTION, {**data, "isActive": data.get("isActive", True)})


def update_policy(policy_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return store.update(COLLECTION, policy_id, data)


def delete_policy(policy_id: str) -> Dict[str, Any]:
    return store.update(COLLECTION, policy_id, {"isActive": False})


def check_compliance(diet_plan_id: str, patient_id: str) -> Dict[str, Any]:
    """
    List the policies relevant to a patient's dosha and conditions next to
    the plan. Every listed policy is reported compliant: plan content is not
    analysed against policy text.
    """
    if store.get_by_id("dietPlans", diet_plan_id) is None:
        raise store.DocumentNotFound("dietPlans", diet_plan_id)
    patient = store.get_by_id("patients", patient_id)
    if patient is None:
        raise store.DocumentNotFound("patients", patient_id)

    dosha = (patient.get("doshaType") or "").lower()
    relevant = search(
        dosha_type=dosha if dosha in ("vata", "pitta", "kapha") else None,
        conditions=patient.get("allergies") or None,
        limit=20,
    )

    checks = [
        {
            "policyId": p["id"],
            "policyTitle": p.get("title"),
            "complianceStatus": "compliant",
            "severity": "medium",
        }
        for p in relevant[:5]
    ]

    statuses = {c["complianceStatus"] for c in checks}
    if statuses <= {"compliant"}:
        overall = "compliant"
    elif "non_compliant" in statuses:
        overall = "non_compliant"
    else:
        overall = "partial"

    return {
        "dietPlanId": diet_plan_id,
        "patientId": patient_id,
        "overallCompliance": overall,
        "policyChecks": checks,
        "generatedAt": utcnow(),
    }


def get_stats() -> Dict[str, Any]:
    policies = list_policies()
    active = [p for p in policies if p.get("isActive")]
    cutoff = utcnow() - timedelta(days=RECENT_DAYS)

    by_category: Dict[str, int] = {}
    by_source: Dict[str, int] = {}
    for policy in active:
        by_category[policy.get("category")] = by_category.get(policy.get("category"), 0) + 1
        by_source[policy.get("source")] = by_source.get(policy.get("source"), 0) + 1

    recent = 0
    for policy in active:
        updated = to_datetime(policy.get("updatedAt"))
        if updated and updated > cutoff:
            recent += 1

    return {
        "total": len(policies),
        "active": len(active),
        "byCategory": by_category,
        "bySource": by_source,
        "recentUpdates": recent,
    }
