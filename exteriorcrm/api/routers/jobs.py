"""Jobs router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from exteriorcrm.api.context import get_crm, get_store
from exteriorcrm.api.schemas.sales import JobCreate, JobUpdate
from exteriorcrm.models.entities import Job
from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.store import CRMStore, EntityNotFoundError

router = APIRouter(prefix="/jobs")


@router.get("", response_model=list[Job])
async def list_jobs(store: CRMStore = Depends(get_store)) -> list[Job]:
    return await store.list(Job)


@router.get("/{job_id}", response_model=Job)
async def get_job(job_id: str, store: CRMStore = Depends(get_store)) -> Job:
    job = await store.get(Job, job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.post("", response_model=Job, status_code=201)
async def create_job(body: JobCreate, crm: CRMService = Depends(get_crm)) -> Job:
    return await crm.create_job(body.model_dump())


@router.patch("/{job_id}", response_model=Job)
async def update_job(job_id: str, body: JobUpdate, crm: CRMService = Depends(get_crm)) -> Job:
    try:
        return await crm.update_job(job_id, body.model_dump(exclude_unset=True))
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
