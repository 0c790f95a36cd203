"""Team members router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from exteriorcrm.api.context import get_crm, get_store
from exteriorcrm.api.schemas.organization import TeamMemberCreate, TeamMemberUpdate
from exteriorcrm.models.entities import Division, TeamMember, TeamPosition
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.store import CRMStore, EntityNotFoundError

router = APIRouter(prefix="/team-members")


@router.get("", response_model=list[TeamMember])
async def list_team_members(
    division: Division | None = Query(default=None),
    position: TeamPosition | None = Query(default=None),
    store: CRMStore = Depends(get_store),
) -> list[TeamMember]:
    """List team members by division or position (division wins if both are given)."""
    return await store.team_members_by(division=division, position=position)


@router.get("/{member_id}", response_model=TeamMember)
async def get_team_member(member_id: str, store: CRMStore = Depends(get_store)) -> TeamMember:
    member = await store.get(TeamMember, member_id)
    if member is None:
        raise HTTPException(status_code=404, detail="Team member not found")
    return member


@router.post("", response_model=TeamMember, status_code=201)
async def create_team_member(
    body: TeamMemberCreate,
    crm: CRMService = Depends(get_crm),
) -> TeamMember:
    return await crm.create_team_member(body.model_dump())


@router.patch("/{member_id}", response_model=TeamMember)
async def update_team_member(
    member_id: str,
    body: TeamMemberUpdate,
    crm: CRMService = Depends(get_crm),
) -> TeamMember:
    try:
        return await crm.update_team_member(member_id, body.model_dump(exclude_unset=True))
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Team member not found")


@router.delete("/{member_id}", status_code=204)
async def delete_team_member(member_id: str, crm: CRMService = Depends(get_crm)) -> Response:
    try:
        await crm.delete_team_member(member_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Team member not found")
    return Response(status_code=204)
