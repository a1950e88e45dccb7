"""Project Adapter - batched reads and derived metrics for Levr projects."""

from .adapter import ProjectAdapter
from .types import (
    EntityAddressSet,
    FeeSplitterState,
    GovernanceStats,
    Pricing,
    Project,
    ProjectSummary,
    ProposalType,
    StakingStats,
    TokenRecord,
    TreasuryStats,
    UserState,
)

__all__ = [
    "ProjectAdapter",
    "EntityAddressSet",
    "FeeSplitterState",
    "GovernanceStats",
    "Pricing",
    "Project",
    "ProjectSummary",
    "ProposalType",
    "StakingStats",
    "TokenRecord",
    "TreasuryStats",
    "UserState",
]
