"""Data models for CRM records."""

from exteriorcrm.models.entities import (
    Communication,
    CommunicationType,
    Customer,
    DigestFrequency,
    Division,
    Estimate,
    EstimateStatus,
    Job,
    JobStatus,
    Lead,
    LeadStatus,
    Priority,
    ProjectType,
    Record,
    TeamMember,
    TeamPosition,
    Theme,
    User,
    UserAccount,
    UserSettings,
    Vendor,
    WhiteLabelSettings,
)

__all__ = [
    "Communication",
    "CommunicationType",
    "Customer",
    "DigestFrequency",
    "Division",
    "Estimate",
    "EstimateStatus",
    "Job",
    "JobStatus",
    "Lead",
    "LeadStatus",
    "Priority",
    "ProjectType",
    "Record",
    "TeamMember",
    "TeamPosition",
    "Theme",
    "User",
    "UserAccount",
    "UserSettings",
    "Vendor",
    "WhiteLabelSettings",
]
