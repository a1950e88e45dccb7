from __future__ import annotations

from eth_utils import to_checksum_address

from levr_sdk.core.constants.chains import CHAIN_ID_BASE, CHAIN_ID_BASE_SEPOLIA

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Multicall3 is deployed at the same address on every supported chain.
MULTICALL3_ADDRESS = to_checksum_address("0xcA11bde05977b3631167028862bE2a173976CA11")

# Levr per-chain deployments.
#
# Notes:
# - Anvil deployments change on every run; supply them through
#   config.json ``contracts.<chain_id>``.
# - The Clanker airdrop contract is configured the same way.
LEVR_CONTRACTS_BY_CHAIN: dict[int, dict[str, str]] = {
    CHAIN_ID_BASE: {
        "factory": to_checksum_address("0xB8fD8794F9a96A25Ed7C25dE76a3bbb64a4a5800"),
        "fee_splitter_deployer": to_checksum_address(
            "0x0069624A9783298A157d794Ad97FAfDD0D68371B"
        ),
        "weth": to_checksum_address("0x4200000000000000000000000000000000000006"),
    },
    CHAIN_ID_BASE_SEPOLIA: {
        "factory": to_checksum_address("0x51742606fAf2356d5a3d78B80Aed0703E25dF1D5"),
        "fee_splitter_deployer": to_checksum_address(
            "0xeBc3c6c3DC5d473D8B71479F005Aa37Ade4CBD0F"
        ),
        "weth": to_checksum_address("0x4200000000000000000000000000000000000006"),
    },
}
