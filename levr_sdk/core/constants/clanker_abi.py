from __future__ import annotations

from typing import Any

# Minimal ABIs for Clanker v4 (token metadata plus the airdrop and vault extensions).

CLANKER_TOKEN_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "admin",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "type": "function",
        "name": "originalAdmin",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "type": "function",
        "name": "metadata",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "function",
        "name": "imageUrl",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
]

CLANKER_AIRDROP_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "amountAvailableToClaim",
        "stateMutability": "view",
        "inputs": [
            {"name": "token", "type": "address"},
            {"name": "recipient", "type": "address"},
            {"name": "allocatedAmount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {"type": "error", "name": "AirdropNotCreated", "inputs": []},
    {"type": "error", "name": "AirdropNotUnlocked", "inputs": []},
    {"type": "error", "name": "UserMaxClaimed", "inputs": []},
    {"type": "error", "name": "TotalMaxClaimed", "inputs": []},
]

CLANKER_VAULT_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "allocation",
        "stateMutability": "view",
        "inputs": [{"name": "token", "type": "address"}],
        "outputs": [
            {"name": "token", "type": "address"},
            {"name": "amountTotal", "type": "uint256"},
            {"name": "amountClaimed", "type": "uint256"},
            {"name": "lockupEndTime", "type": "uint256"},
            {"name": "vestingEndTime", "type": "uint256"},
            {"name": "admin", "type": "address"},
        ],
    },
    {
        "type": "function",
        "name": "amountAvailableToClaim",
        "stateMutability": "view",
        "inputs": [{"name": "token", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]
