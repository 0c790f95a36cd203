"""Estimates router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from exteriorcrm.api.context import get_crm, get_store
from exteriorcrm.api.schemas.sales import EstimateCreate, EstimateUpdate
from exteriorcrm.models.entities import Estimate
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.store import CRMStore, EntityNotFoundError

router = APIRouter(prefix="/estimates")


@router.get("", response_model=list[Estimate])
async def list_estimates(store: CRMStore = Depends(get_store)) -> list[Estimate]:
    return await store.list(Estimate)


@router.get("/{estimate_id}", response_model=Estimate)
async def get_estimate(estimate_id: str, store: CRMStore = Depends(get_store)) -> Estimate:
    estimate = await store.get(Estimate, estimate_id)
    if estimate is None:
        raise HTTPException(status_code=404, detail="Estimate not found")
    return estimate


@router.post("", response_model=Estimate, status_code=201)
async def create_estimate(body: EstimateCreate, crm: CRMService = Depends(get_crm)) -> Estimate:
    """Create an estimate and announce it."""
    return await crm.create_estimate(body.model_dump())


@router.patch("/{estimate_id}", response_model=Estimate)
async def update_estimate(
    estimate_id: str,
    body: EstimateUpdate,
    crm: CRMService = Depends(get_crm),
) -> Estimate:
    """Update an estimate and announce the change."""
    try:
        return await crm.update_estimate(estimate_id, body.model_dump(exclude_unset=True))
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Estimate not found")
