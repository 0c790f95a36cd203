"""Customers router. Customer changes are not broadcast."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from exteriorcrm.api.context import get_crm, get_store
from exteriorcrm.api.schemas.contacts import CustomerCreate, CustomerUpdate
from exteriorcrm.models.entities import Customer
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.store import CRMStore, EntityNotFoundError

router = APIRouter(prefix="/customers")


@router.get("", response_model=list[Customer])
async def list_customers(store: CRMStore = Depends(get_store)) -> list[Customer]:
    return await store.list(Customer)


@router.get("/{customer_id}", response_model=Customer)
async def get_customer(customer_id: str, store: CRMStore = Depends(get_store)) -> Customer:
    customer = await store.get(Customer, customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.post("", response_model=Customer, status_code=201)
async def create_customer(body: CustomerCreate, crm: CRMService = Depends(get_crm)) -> Customer:
    return await crm.create_customer(body.model_dump())


@router.patch("/{customer_id}", response_model=Customer)
async def update_customer(
    customer_id: str,
    body: CustomerUpdate,
    crm: CRMService = Depends(get_crm),
) -> Customer:
    try:
        return await crm.update_customer(customer_id, body.model_dump(exclude_unset=True))
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")
