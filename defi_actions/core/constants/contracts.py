from defi_actions.core.constants.chains import CHAIN_ID_TAIKO, CHAIN_ID_TAIKO_HOODI

TAIKOSWAP_SOURCE_URL = "https://swap.taiko.xyz"

# Uniswap-V3 fee tiers simulated by the on-chain quoter, in hundredths of a bip.
UNISWAP_V3_FEE_TIERS: tuple[int, ...] = (100, 500, 3000, 10000)

TAIKOSWAP_CONTRACTS: dict[int, dict[str, str]] = {
    CHAIN_ID_TAIKO: {
        "quoter_v2": "0xcBa70D57be34aA26557B8E80135a9B7754680aDb",
        "swap_router": "0x1A0c3a0Cfd1791FAC7798FA2b05208B66aaadfeD",
    },
    CHAIN_ID_TAIKO_HOODI: {
        "quoter_v2": "0xAC8D93657DCc5C0dE9d9AF2772aF9eA3A032a1C6",
        "swap_router": "0x482233e4DBD56853530fA1918157CE59B60dF230",
    },
}
