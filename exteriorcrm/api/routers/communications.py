"""Communications router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from exteriorcrm.api.context import get_crm, get_store
from exteriorcrm.api.schemas.contacts import CommunicationCreate
from exteriorcrm.models.entities import Communication
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.store import CRMStore

router = APIRouter(prefix="/communications")


@router.get("", response_model=list[Communication])
async def list_communications(
    lead_id: str | None = Query(default=None, description="Only communications for this lead"),
    customer_id: str | None = Query(default=None, description="Only communications for this customer"),
    store: CRMStore = Depends(get_store),
) -> list[Communication]:
    """
    List logged communications.

    When both filters are given, lead_id wins.
    """
    return await store.communications_for(lead_id=lead_id, customer_id=customer_id)


@router.post("", response_model=Communication, status_code=201)
async def create_communication(
    body: CommunicationCreate,
    crm: CRMService = Depends(get_crm),
) -> Communication:
    """Log a communication and announce it."""
    return await crm.create_communication(body.model_dump())
