"""User account and preferences router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from exteriorcrm.api.context import get_crm, get_store
from exteriorcrm.api.schemas.settings import AccountUpdate, UserSettingsUpdate
from exteriorcrm.models.entities import User, UserAccount, UserSettings
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.store import CRMStore, EntityNotFoundError

router = APIRouter(prefix="/settings")


@router.get("/account/{user_id}", response_model=UserAccount)
async def get_account(user_id: str, store: CRMStore = Depends(get_store)) -> UserAccount:
    user = await store.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user.account()


@router.put("/account/{user_id}", response_model=UserAccount)
async def update_account(
    user_id: str,
    body: AccountUpdate,
    crm: CRMService = Depends(get_crm),
) -> UserAccount:
    """Update account fields and announce them."""
    try:
        return await crm.update_account(user_id, body.model_dump(exclude_unset=True))
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.get("/preferences/{user_id}", response_model=UserSettings)
async def get_preferences(user_id: str, store: CRMStore = Depends(get_store)) -> UserSettings:
    """Preferences for a user, with defaults if never saved."""
    try:
        return await store.get_user_settings(user_id)
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.put("/preferences/{user_id}", response_model=UserSettings)
async def update_preferences(
    user_id: str,
    body: UserSettingsUpdate,
    crm: CRMService = Depends(get_crm),
) -> UserSettings:
    try:
        return await crm.update_user_settings(user_id, body.model_dump(exclude_unset=True))
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
