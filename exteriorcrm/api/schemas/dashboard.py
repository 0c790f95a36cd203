"""Dashboard API Schemas."""

from decimal import Decimal

from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Headline figures for the dashboard."""

    total_leads: int
    active_estimates: int
    conversion_rate: int
    closed_deals: Decimal
    lead_growth: int
    estimate_growth: int
