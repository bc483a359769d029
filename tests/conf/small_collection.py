from nftledger.conf.settings import CollectionSettings

SETTINGS = CollectionSettings(
    MAX_TOTAL_TOKENS=4,
    PUBLIC_MAX_PER_TX=2,
    ITEM_PRICE_ALLOWLIST=6,
    ITEM_PRICE_PUBLIC=8,
    TRANSFERS_DISABLED=False,
    CUSTODIAL_ADDRESS="28" + "ab" * 24,
)
