"""Settings router — group working-hours policy read / partial update."""


from typing import Any

from fastapi import APIRouter, Body, Depends

from hrms.dependencies import get_policy_store
from hrms.policy.schemas import GroupWorkingHours, GroupWorkingHoursSaved
from hrms.policy.store import PolicyStore

router = APIRouter(prefix="", tags=["settings"])


# ── GET /group-working-hours ────────────────────────────────────────

@router.get(
    "/group-working-hours",
    response_model=GroupWorkingHours,
    response_model_exclude_none=True,
)
def get_group_working_hours(
    store: PolicyStore = Depends(get_policy_store),
):
    """Return the policies currently in effect for Group A and Group B."""
    return store.get_group_working_hours()


# ── POST /group-working-hours ───────────────────────────────────────

@router.post(
    "/group-working-hours",
    response_model=GroupWorkingHoursSaved,
    response_model_exclude_none=True,
)
def update_group_working_hours(
    body: dict[str, Any] = Body(...),
    store: PolicyStore = Depends(get_policy_store),
):
    """Merge a partial policy document (e.g. only ``groupA.minHoursForOT``)."""
    policy = store.update_group_working_hours(body)
    return GroupWorkingHoursSaved(
        message="Group working hours saved successfully",
        settings=policy,
    )
