from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from core.app_context import AppContext
from web.backend.dependencies import get_context

router = APIRouter()


@router.get("/tree")
def org_tree(search: Optional[str] = None, context: AppContext = Depends(get_context)):
    tree = context.organization.build_tree(
        search=search,
        goals_by_org_unit=context.goals.get_goals_by_org_unit,
    )
    return {"tree": tree}


@router.get("/units")
def list_units(context: AppContext = Depends(get_context)):
    return {"units": [u.to_dict() for u in context.organization.org_units]}


@router.get("/units/{org_unit_id}/users")
def list_unit_users(org_unit_id: str, context: AppContext = Depends(get_context)):
    if context.organization.get_org_unit(org_unit_id) is None:
        raise HTTPException(status_code=404, detail=f"Org unit not found: {org_unit_id}")
    users = context.organization.get_users_by_org_unit(org_unit_id)
    return {"users": [u.to_dict() for u in users]}
