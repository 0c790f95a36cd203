"""White-label branding router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from exteriorcrm.api.context import get_crm, get_store
from exteriorcrm.api.schemas.organization import WhiteLabelUpdate
from exteriorcrm.models.entities import WhiteLabelSettings
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.store import CRMStore

router = APIRouter(prefix="/white-label")


@router.get("", response_model=WhiteLabelSettings)
async def get_white_label(store: CRMStore = Depends(get_store)) -> WhiteLabelSettings:
    return await store.get_white_label()


@router.patch("", response_model=WhiteLabelSettings)
async def update_white_label(
    body: WhiteLabelUpdate,
    crm: CRMService = Depends(get_crm),
) -> WhiteLabelSettings:
    """Update branding and announce it."""
    return await crm.update_white_label(body.model_dump(exclude_unset=True))
