ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_PLACEHOLDER_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

BPS_DENOMINATOR = 10_000
DEFAULT_SLIPPAGE_BPS = 50

# Timeout constants (seconds)
DEFAULT_HTTP_TIMEOUT = 30.0

# Fill time reported when a bridge provider omits an estimate.
DEFAULT_BRIDGE_FILL_TIME_S = 120

USER_AGENT = "defi-actions/0.1"

# Symbols whose base-unit fee can be read as an approximate USD value.
STABLE_SYMBOLS = {
    "USDC",
    "USDT",
    "USDT0",
    "DAI",
    "USDE",
    "USDS",
    "USD1",
    "FRAX",
    "GHO",
    "TUSD",
    "LUSD",
    "PYUSD",
}
