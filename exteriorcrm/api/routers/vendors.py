"""Vendors router. Vendor changes are not broadcast."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from exteriorcrm.api.context import get_crm, get_store
from exteriorcrm.api.schemas.contacts import VendorCreate, VendorUpdate
from exteriorcrm.models.entities import Vendor
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.store import CRMStore, EntityNotFoundError

router = APIRouter(prefix="/vendors")


@router.get("", response_model=list[Vendor])
async def list_vendors(store: CRMStore = Depends(get_store)) -> list[Vendor]:
    return await store.list(Vendor)


@router.post("", response_model=Vendor, status_code=201)
async def create_vendor(body: VendorCreate, crm: CRMService = Depends(get_crm)) -> Vendor:
    return await crm.create_vendor(body.model_dump())


@router.patch("/{vendor_id}", response_model=Vendor)
async def update_vendor(
    vendor_id: str,
    body: VendorUpdate,
    crm: CRMService = Depends(get_crm),
) -> Vendor:
    try:
        return await crm.update_vendor(vendor_id, body.model_dump(exclude_unset=True))
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Vendor not found")
