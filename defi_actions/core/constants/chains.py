CHAIN_ID_ETHEREUM = 1
CHAIN_ID_OPTIMISM = 10
CHAIN_ID_BSC = 56
CHAIN_ID_GNOSIS = 100
CHAIN_ID_POLYGON = 137
CHAIN_ID_SONIC = 146
CHAIN_ID_FRAXTAL = 252
CHAIN_ID_ZKSYNC = 324
CHAIN_ID_WORLDCHAIN = 480
CHAIN_ID_HYPEREVM = 999
CHAIN_ID_MANTLE = 5000
CHAIN_ID_BASE = 8453
CHAIN_ID_ARBITRUM = 42161
CHAIN_ID_CELO = 42220
CHAIN_ID_AVALANCHE = 43114
CHAIN_ID_INK = 57073
CHAIN_ID_LINEA = 59144
CHAIN_ID_BERACHAIN = 80094
CHAIN_ID_BLAST = 81457
CHAIN_ID_TAIKO = 167000
CHAIN_ID_TAIKO_HOODI = 167013
CHAIN_ID_SCROLL = 534352

# (name, canonical slug) keyed by EVM chain id.
CHAIN_NAMES: dict[int, tuple[str, str]] = {
    CHAIN_ID_ETHEREUM: ("Ethereum", "ethereum"),
    CHAIN_ID_OPTIMISM: ("Optimism", "optimism"),
    CHAIN_ID_BSC: ("BSC", "bsc"),
    CHAIN_ID_GNOSIS: ("Gnosis", "gnosis"),
    CHAIN_ID_POLYGON: ("Polygon", "polygon"),
    CHAIN_ID_SONIC: ("Sonic", "sonic"),
    CHAIN_ID_FRAXTAL: ("Fraxtal", "fraxtal"),
    CHAIN_ID_ZKSYNC: ("zkSync Era", "zksync"),
    CHAIN_ID_WORLDCHAIN: ("World Chain", "world-chain"),
    CHAIN_ID_HYPEREVM: ("HyperEVM", "hyperevm"),
    CHAIN_ID_MANTLE: ("Mantle", "mantle"),
    CHAIN_ID_BASE: ("Base", "base"),
    CHAIN_ID_ARBITRUM: ("Arbitrum", "arbitrum"),
    CHAIN_ID_CELO: ("Celo", "celo"),
    CHAIN_ID_AVALANCHE: ("Avalanche", "avalanche"),
    CHAIN_ID_INK: ("Ink", "ink"),
    CHAIN_ID_LINEA: ("Linea", "linea"),
    CHAIN_ID_BERACHAIN: ("Berachain", "berachain"),
    CHAIN_ID_BLAST: ("Blast", "blast"),
    CHAIN_ID_TAIKO: ("Taiko", "taiko"),
    CHAIN_ID_TAIKO_HOODI: ("Taiko Hoodi", "taiko-hoodi"),
    CHAIN_ID_SCROLL: ("Scroll", "scroll"),
}

CHAIN_CODE_TO_ID: dict[str, int] = {
    slug: chain_id for chain_id, (_, slug) in CHAIN_NAMES.items()
}
CHAIN_CODE_TO_ID.update(
    {
        "mainnet": CHAIN_ID_ETHEREUM,
        "op-mainnet": CHAIN_ID_OPTIMISM,
        "xdai": CHAIN_ID_GNOSIS,
        "zksync-era": CHAIN_ID_ZKSYNC,
        "worldchain": CHAIN_ID_WORLDCHAIN,
        "hyper-evm": CHAIN_ID_HYPEREVM,
        "arbitrum-one": CHAIN_ID_ARBITRUM,
        "taiko-alethia": CHAIN_ID_TAIKO,
    }
)

# Canonical public RPC endpoints used whenever no override is supplied.
DEFAULT_RPC_URLS: dict[int, str] = {
    CHAIN_ID_ETHEREUM: "https://eth.llamarpc.com",
    CHAIN_ID_OPTIMISM: "https://mainnet.optimism.io",
    CHAIN_ID_BSC: "https://bsc-dataseed.binance.org",
    CHAIN_ID_GNOSIS: "https://rpc.gnosischain.com",
    CHAIN_ID_POLYGON: "https://polygon-rpc.com",
    CHAIN_ID_SONIC: "https://rpc.soniclabs.com",
    CHAIN_ID_FRAXTAL: "https://rpc.frax.com",
    CHAIN_ID_ZKSYNC: "https://mainnet.era.zksync.io",
    CHAIN_ID_WORLDCHAIN: "https://worldchain-mainnet.g.alchemy.com/public",
    CHAIN_ID_MANTLE: "https://rpc.mantle.xyz",
    CHAIN_ID_BASE: "https://mainnet.base.org",
    CHAIN_ID_CELO: "https://forno.celo.org",
    CHAIN_ID_ARBITRUM: "https://arb1.arbitrum.io/rpc",
    CHAIN_ID_AVALANCHE: "https://api.avax.network/ext/bc/C/rpc",
    CHAIN_ID_INK: "https://rpc-gel.inkonchain.com",
    CHAIN_ID_LINEA: "https://rpc.linea.build",
    CHAIN_ID_BERACHAIN: "https://rpc.berachain.com",
    CHAIN_ID_BLAST: "https://rpc.blast.io",
    CHAIN_ID_TAIKO: "https://rpc.mainnet.taiko.xyz",
    CHAIN_ID_TAIKO_HOODI: "https://rpc.hoodi.taiko.xyz",
    CHAIN_ID_SCROLL: "https://rpc.scroll.io",
}
