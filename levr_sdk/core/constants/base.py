MANTISSA = 10**18
SECONDS_PER_YEAR = 365 * 24 * 60 * 60
BPS_DENOMINATOR = 10_000

DEFAULT_TOKEN_DECIMALS = 18

ADAPTER_MULTICALL = "MULTICALL"
ADAPTER_PROJECT = "PROJECT"
ADAPTER_TREASURY_AIRDROP = "TREASURY_AIRDROP"
ADAPTER_VAULT = "VAULT"

# Calls per aggregate3 request. Base public RPCs reject very large eth_call payloads.
DEFAULT_MULTICALL_CHUNK_SIZE = 150

DEFAULT_PAGINATION_LIMIT = 50

# Historical treasury airdrop allocations, in whole tokens (10%..90% of a 100B supply).
TREASURY_AIRDROP_TABLE_VERSION = "v1"
TREASURY_AIRDROP_AMOUNTS_V1: tuple[int, ...] = tuple(
    pct * 1_000_000_000 for pct in range(10, 100, 10)
)
