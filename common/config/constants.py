from typing import Final

######################################
# Remote endpoints:
DEFAULT_API_URL: Final[str] = "https://solana.fury.bot"
DEFAULT_RPC_URL: Final[str] = "https://api.mainnet-beta.solana.com"

######################################
# Solana general settings:
LAMPORTS_PER_SOL: Final[int] = 1_000_000_000
# Rough fee estimation per transfer for balance checks
EST_TX_FEE_SOL: Final[float] = 0.01
MIN_ADDRESS_LEN: Final[int] = 32
MAX_ADDRESS_LEN: Final[int] = 44

######################################
# Bundle settings:
MAX_TX_PER_BUNDLE: Final[int] = 5
DEFAULT_MAX_BUNDLES_PER_SEC: Final[int] = 2
DEFAULT_RATE_LIMIT_DELAY_MSEC: Final[int] = 500
RATE_LIMIT_WINDOW_MSEC: Final[int] = 1000

######################################
# Outer batch settings:
DEFAULT_MAX_RECIPIENTS_PER_BATCH: Final[int] = 3
DISTRIBUTE_BATCH_PAUSE_SEC: Final[float] = 3.0
MIX_RECIPIENT_PAUSE_SEC: Final[float] = 3.0
TRANSFER_ITEM_PAUSE_SEC: Final[float] = 1.0
BURN_ITEM_PAUSE_SEC: Final[float] = 1.0
CREATE_CONFIG_PAUSE_SEC: Final[float] = 0.5
CREATE_BUNDLE_PAUSE_SEC: Final[float] = 0.1
MAX_CREATE_WALLET_CNT: Final[int] = 5

######################################
# Trading defaults:
DEFAULT_SLIPPAGE_BPS: Final[int] = 100
DEFAULT_JITO_TIP_LAMPORTS: Final[int] = 5000
