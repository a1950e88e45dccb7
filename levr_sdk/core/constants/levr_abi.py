from __future__ import annotations

from typing import Any

# Minimal ABIs for the Levr v1 contract family (read surface only).

_PROJECT_COMPONENTS: list[dict[str, Any]] = [
    {"name": "treasury", "type": "address"},
    {"name": "governor", "type": "address"},
    {"name": "staking", "type": "address"},
    {"name": "stakedToken", "type": "address"},
    {"name": "verified", "type": "bool"},
]

LEVR_FACTORY_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "getProjectContracts",
        "stateMutability": "view",
        "inputs": [{"name": "clankerToken", "type": "address"}],
        "outputs": [
            {"name": "project", "type": "tuple", "components": _PROJECT_COMPONENTS}
        ],
    },
    {
        "type": "function",
        "name": "getProjects",
        "stateMutability": "view",
        "inputs": [
            {"name": "offset", "type": "uint256"},
            {"name": "limit", "type": "uint256"},
        ],
        "outputs": [
            {
                "name": "projects",
                "type": "tuple[]",
                "components": [
                    {"name": "clankerToken", "type": "address"},
                    {
                        "name": "project",
                        "type": "tuple",
                        "components": _PROJECT_COMPONENTS,
                    },
                ],
            },
            {"name": "total", "type": "uint256"},
        ],
    },
    {
        "type": "function",
        "name": "trustedForwarder",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
]

LEVR_GOVERNOR_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "currentCycleId",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "activeProposalCount",
        "stateMutability": "view",
        "inputs": [{"name": "proposalType", "type": "uint8"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

# outstandingRewards is read as (available, pending).
LEVR_STAKING_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "totalStaked",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "aprBps",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "outstandingRewards",
        "stateMutability": "view",
        "inputs": [{"name": "token", "type": "address"}],
        "outputs": [
            {"name": "available", "type": "uint256"},
            {"name": "pending", "type": "uint256"},
        ],
    },
    {
        "type": "function",
        "name": "rewardRatePerSecond",
        "stateMutability": "view",
        "inputs": [{"name": "token", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "escrowBalance",
        "stateMutability": "view",
        "inputs": [{"name": "token", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "streamWindowSeconds",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint32"}],
    },
    {
        "type": "function",
        "name": "streamStart",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint64"}],
    },
    {
        "type": "function",
        "name": "streamEnd",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint64"}],
    },
    {
        "type": "function",
        "name": "stakedBalanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "claimableRewards",
        "stateMutability": "view",
        "inputs": [
            {"name": "account", "type": "address"},
            {"name": "token", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "getVotingPower",
        "stateMutability": "view",
        "inputs": [{"name": "user", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]

LEVR_FEE_SPLITTER_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "isSplitsConfigured",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "configured", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "pendingFees",
        "stateMutability": "view",
        "inputs": [{"name": "rewardToken", "type": "address"}],
        "outputs": [{"name": "pending", "type": "uint256"}],
    },
]

LEVR_FEE_SPLITTER_DEPLOYER_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "getSplitter",
        "stateMutability": "view",
        "inputs": [{"name": "clankerToken", "type": "address"}],
        "outputs": [{"name": "", "type": "address"}],
    },
]
