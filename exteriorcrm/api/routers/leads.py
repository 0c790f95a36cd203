"""
Leads Router

REST API endpoints for leads. Every successful mutation is broadcast
to connected clients before the response is returned.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from exteriorcrm.api.context import get_crm, get_store
from exteriorcrm.api.schemas.leads import LeadCreate, LeadUpdate
from exteriorcrm.models.entities import Division, Lead
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.store import CRMStore, EntityNotFoundError

router = APIRouter(prefix="/leads")


@router.get("", response_model=list[Lead])
async def list_leads(
    division: Division | None = Query(default=None, description="Filter by division"),
    store: CRMStore = Depends(get_store),
) -> list[Lead]:
    """List leads, optionally for one division."""
    if division:
        return await store.leads_by_division(division)
    return await store.list(Lead)


@router.get("/{lead_id}", response_model=Lead)
async def get_lead(lead_id: str, store: CRMStore = Depends(get_store)) -> Lead:
    """Get a lead by id."""
    lead = await store.get(Lead, lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead


@router.post("", response_model=Lead, status_code=201)
async def create_lead(body: LeadCreate, crm: CRMService = Depends(get_crm)) -> Lead:
    """Create a lead and announce it."""
    return await crm.create_lead(body.model_dump())


@router.patch("/{lead_id}", response_model=Lead)
async def update_lead(
    lead_id: str,
    body: LeadUpdate,
    crm: CRMService = Depends(get_crm),
) -> Lead:
    """Update the fields present in the body."""
    try:
        return await crm.update_lead(lead_id, body.model_dump(exclude_unset=True))
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Lead not found")


@router.delete("/{lead_id}", status_code=204)
async def delete_lead(lead_id: str, crm: CRMService = Depends(get_crm)) -> Response:
    """Delete a lead."""
    try:
        await crm.delete_lead(lead_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Lead not found")
    return Response(status_code=204)
