"""
ExteriorCRM Services Layer

Storage, mutation and third-party integrations shared by the API and CLI.
"""

from exteriorcrm.services.crm import CRMService
from exteriorcrm.services.outlook import (
    OutlookAPIError,
    OutlookClient,
    OutlookError,
    OutlookNotConnectedError,
)
from exteriorcrm.services.store import CRMStore, EntityNotFoundError

__all__ = [
    "CRMService",
    "CRMStore",
    "EntityNotFoundError",
    "OutlookAPIError",
    "OutlookClient",
    "OutlookError",
    "OutlookNotConnectedError",
]
