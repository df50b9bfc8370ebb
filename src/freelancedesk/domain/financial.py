"""Financial rollups over invoices.

Revenue is always "paid invoice amount".  ``revenue_by_client`` and
``revenue_by_platform`` are computed from the same client-by-client pass
over paid invoices, so their totals agree for every snapshot.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from freelancedesk.domain.snapshot import Snapshot
from freelancedesk.domain.types import InvoiceStatus


class ClientRevenue(BaseModel):
    model_config = {"frozen": True}

    client_id: str
    name: str
    revenue: float
    invoices: int


class PlatformRevenue(BaseModel):
    model_config = {"frozen": True}

    platform: str
    revenue: float


class FinancialSnapshot(BaseModel):
    """Money earned and money owed, broken down by client and by platform."""

    model_config = {"frozen": True}

    monthly_income: float = 0.0
    pending_payments: float = 0.0
    # No subscription data exists in the backend.
    recurring_revenue: float = 0.0
    revenue_by_client: list[ClientRevenue] = Field(default_factory=list)
    revenue_by_platform: list[PlatformRevenue] = Field(default_factory=list)


def month_start(now: datetime) -> datetime:
    """First instant of *now*'s calendar month, in UTC."""
    current = now.astimezone(UTC)
    return datetime(current.year, current.month, 1, tzinfo=UTC)


def compute_financials(snapshot: Snapshot) -> FinancialSnapshot:
    now = snapshot.taken_at
    start = month_start(now)
    paid = [i for i in snapshot.invoices if i.status == InvoiceStatus.PAID]

    monthly_income = sum(i.amount for i in paid if i.created_at >= start)
    pending_payments = sum(
        i.amount for i in snapshot.invoices if i.status == InvoiceStatus.UNPAID
    )

    by_client: list[ClientRevenue] = []
    by_platform: dict[str, float] = {}
    for client in snapshot.clients:
        client_paid = [i for i in paid if i.client_id == client.id]
        revenue = sum(i.amount for i in client_paid)
        by_client.append(
            ClientRevenue(
                client_id=client.id,
                name=client.name,
                revenue=revenue,
                invoices=len(client_paid),
            )
        )
        by_platform[client.source] = by_platform.get(client.source, 0.0) + revenue

    ranked_clients = sorted(
        (entry for entry in by_client if entry.revenue > 0),
        key=lambda entry: entry.revenue,
        reverse=True,
    )
    return FinancialSnapshot(
        monthly_income=float(monthly_income),
        pending_payments=float(pending_payments),
        recurring_revenue=0.0,
        revenue_by_client=ranked_clients,
        revenue_by_platform=[
            PlatformRevenue(platform=platform, revenue=revenue)
            for platform, revenue in by_platform.items()
        ],
    )
