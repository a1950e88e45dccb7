CHAIN_ID_BASE = 8453
CHAIN_ID_BASE_SEPOLIA = 84532
CHAIN_ID_ANVIL = 31337

CHAIN_CODE_TO_ID = {
    "base": CHAIN_ID_BASE,
    "base-sepolia": CHAIN_ID_BASE_SEPOLIA,
    "sepolia": CHAIN_ID_BASE_SEPOLIA,
    "anvil": CHAIN_ID_ANVIL,
}

# Public endpoints used when config.json has no rpc_urls entry for the chain.
DEFAULT_RPC_URLS: dict[int, list[str]] = {
    CHAIN_ID_BASE: ["https://mainnet.base.org"],
    CHAIN_ID_BASE_SEPOLIA: ["https://sepolia.base.org"],
    CHAIN_ID_ANVIL: ["http://127.0.0.1:8545"],
}
