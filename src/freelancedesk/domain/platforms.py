"""Client acquisition platform statistics."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, Field

from freelancedesk.domain.financial import PlatformRevenue
from freelancedesk.domain.records import DORMANCY_DAYS, is_dormant
from freelancedesk.domain.snapshot import Snapshot


class PlatformShare(BaseModel):
    model_config = {"frozen": True}

    platform: str
    count: int
    percentage: float


class PlatformRevenueShare(BaseModel):
    model_config = {"frozen": True}

    platform: str
    revenue: float
    share: float


class PlatformInsights(BaseModel):
    """Client activity split and per-platform distribution."""

    model_config = {"frozen": True}

    total_clients: int = 0
    active_clients: int = 0
    inactive_clients: int = 0
    active_percentage: float = 0.0
    inactive_percentage: float = 0.0
    platform_count: int = 0
    distribution: list[PlatformShare] = Field(default_factory=list)
    revenue: list[PlatformRevenueShare] = Field(default_factory=list)


def percentage(part: float, whole: float) -> float:
    """``part / whole * 100`` rounded to one decimal; 0 when *whole* is 0."""
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 1)


def compute_platform_insights(
    snapshot: Snapshot,
    revenue_by_platform: Sequence[PlatformRevenue],
    *,
    dormancy_days: int = DORMANCY_DAYS,
) -> PlatformInsights:
    """Active/inactive split, client share per source, and revenue share per source."""
    now = snapshot.taken_at
    total = len(snapshot.clients)
    active = sum(1 for c in snapshot.clients if not is_dormant(c, now, dormancy_days))
    inactive = total - active

    counts: dict[str, int] = {}
    for client in snapshot.clients:
        counts[client.source] = counts.get(client.source, 0) + 1

    distribution = [
        PlatformShare(platform=platform, count=count, percentage=percentage(count, total))
        for platform, count in sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    ]

    total_revenue = sum(entry.revenue for entry in revenue_by_platform)
    revenue = [
        PlatformRevenueShare(
            platform=entry.platform,
            revenue=entry.revenue,
            share=percentage(entry.revenue, total_revenue),
        )
        for entry in sorted(revenue_by_platform, key=lambda e: e.revenue, reverse=True)
    ]

    return PlatformInsights(
        total_clients=total,
        active_clients=active,
        inactive_clients=inactive,
        active_percentage=percentage(active, total),
        inactive_percentage=percentage(inactive, total),
        platform_count=len(counts),
        distribution=distribution,
        revenue=revenue,
    )
