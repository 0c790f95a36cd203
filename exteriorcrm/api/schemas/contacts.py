"""
Contact API Schemas

Pydantic models for customer, vendor and communication API requests.
"""

from pydantic import BaseModel, EmailStr, Field

from exteriorcrm.models.entities import CommunicationFields, CustomerFields, VendorFields


class CustomerCreate(CustomerFields):
    """Request to create a customer."""


class CustomerUpdate(BaseModel):
    """Partial update of a customer."""

    name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    notes: str | None = None


class VendorCreate(VendorFields):
    """Request to create a vendor."""


class VendorUpdate(BaseModel):
    """Partial update of a vendor."""

    name: str | None = Field(default=None, min_length=1)
    contact_person: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None
    category: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    notes: str | None = None
    is_active: bool | None = None


class CommunicationCreate(CommunicationFields):
    """Request to log a communication."""
