"""Records produced by ProjectAdapter (immutable pydantic models)."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from levr_sdk.core.constants.contracts import ZERO_ADDRESS


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProposalType(IntEnum):
    BOOST_STAKING_POOL = 0
    TRANSFER_TO_ADDRESS = 1


class Pricing(_Record):
    """USD prices supplied by the caller; the secondary asset is WETH on Base."""

    secondary_asset_usd: str
    primary_asset_usd: str


class EntityAddressSet(_Record):
    treasury: str = ZERO_ADDRESS
    governor: str = ZERO_ADDRESS
    staking: str = ZERO_ADDRESS
    staked_token: str = ZERO_ADDRESS
    factory: str = ZERO_ADDRESS

    @property
    def is_registered(self) -> bool:
        return ZERO_ADDRESS not in (
            self.treasury,
            self.governor,
            self.staking,
            self.staked_token,
        )


class FactoryData(_Record):
    addresses: EntityAddressSet
    forwarder: str = ZERO_ADDRESS
    verified: bool = False
    fee_splitter: str | None = None


class BalanceResult(_Record):
    raw: int
    formatted: str
    usd: str | None = None


class ProjectMetadata(_Record):
    model_config = ConfigDict(frozen=True, extra="allow")

    description: str = ""
    social_media_urls: tuple[Any, ...] = Field(default=(), alias="socialMediaUrls")
    audit_urls: tuple[Any, ...] = Field(default=(), alias="auditUrls")

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("social_media_urls", "audit_urls", mode="before")
    @classmethod
    def coerce_url_list(cls, value: Any) -> tuple[Any, ...]:
        return tuple(value) if isinstance(value, list | tuple) else ()


class TokenRecord(_Record):
    address: str
    decimals: int
    name: str
    symbol: str
    total_supply: int
    admin: str = ZERO_ADDRESS
    original_admin: str = ZERO_ADDRESS
    metadata: ProjectMetadata | None = None
    image_url: str | None = None


class TreasuryStats(_Record):
    balance: BalanceResult
    staking_balance: BalanceResult
    staking_secondary_balance: BalanceResult | None = None
    total_allocated: BalanceResult
    utilization_bps: int
    utilization: float


class ProposalCounts(_Record):
    """Active proposal count per ``ProposalType``; index it with the enum."""

    boost_staking_pool: int = 0
    transfer_to_address: int = 0

    def __getitem__(self, kind: ProposalType) -> int:
        return getattr(self, ProposalType(kind).name.lower())

    @property
    def total(self) -> int:
        return sum(self[kind] for kind in ProposalType)


class GovernanceStats(_Record):
    current_cycle_id: int
    raw_cycle_id: int
    active_proposals: ProposalCounts

    @property
    def total_active(self) -> int:
        return self.active_proposals.total


class AprValue(_Record):
    bps: int
    percentage: float


class RewardBalances(_Record):
    available: BalanceResult
    pending: BalanceResult


class StreamWindow(_Record):
    start: int
    end: int
    window_seconds: int
    is_active: bool


class StakingApr(_Record):
    primary: AprValue
    secondary: AprValue | None = None


class OutstandingRewards(_Record):
    primary: RewardBalances
    secondary: RewardBalances | None = None


class RewardRates(_Record):
    primary: BalanceResult
    secondary: BalanceResult | None = None


class FeeSplitterState(_Record):
    address: str
    active: bool
    pending_fees: int
    pending_fees_secondary: int | None = None


class StakingStats(_Record):
    total_staked: BalanceResult
    apr: StakingApr
    outstanding_rewards: OutstandingRewards
    reward_rates: RewardRates
    escrow_balance: BalanceResult
    stream: StreamWindow
    reference_timestamp: int | None = None


class Project(_Record):
    chain_id: int
    addresses: EntityAddressSet
    forwarder: str
    token: TokenRecord
    treasury_stats: TreasuryStats
    staking_stats: StakingStats
    governance_stats: GovernanceStats
    fee_splitter: FeeSplitterState | None = None
    pricing: Pricing | None = None
    # "group.method" of every read that failed and was replaced by a default.
    defaulted: tuple[str, ...] = ()

    @property
    def cache_key(self) -> tuple[int, str]:
        return self.chain_id, self.token.address.lower()


class ProjectSummary(_Record):
    chain_id: int
    addresses: EntityAddressSet
    verified: bool = False
    token: TokenRecord
    treasury_stats: TreasuryStats
    governance_stats: GovernanceStats
    defaulted: tuple[str, ...] = ()


class UserState(_Record):
    address: str
    token_balance: BalanceResult
    secondary_balance: BalanceResult | None = None
    staked_balance: BalanceResult
    allowance: BalanceResult
    claimable_rewards: BalanceResult
    claimable_rewards_secondary: BalanceResult | None = None
    voting_power: int
    defaulted: tuple[str, ...] = ()
