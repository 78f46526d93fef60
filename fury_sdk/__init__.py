from common.config.config import Config
from .api import (
    BundleResult,
    BundleResultKind,
    BurnItem,
    Platform,
    Protocol,
    QuoteAction,
    QuoteComparison,
    RouteQuote,
    TokenBuyConfig,
    TokenCleanerConfig,
    TokenCreateConfig,
    TokenMetadata,
    TokenSellConfig,
    TransferItem,
    Wallet,
    WalletPnl,
)
from .errors import FuryError, FuryRemoteError, FuryValidationError
from .result import ApiResponse, BatchResult, ValidationResult
from .sdk import FurySdk

__all__ = [
    "ApiResponse",
    "BatchResult",
    "BundleResult",
    "BundleResultKind",
    "BurnItem",
    "Config",
    "FuryError",
    "FuryRemoteError",
    "FurySdk",
    "FuryValidationError",
    "Platform",
    "Protocol",
    "QuoteAction",
    "QuoteComparison",
    "RouteQuote",
    "TokenBuyConfig",
    "TokenCleanerConfig",
    "TokenCreateConfig",
    "TokenMetadata",
    "TokenSellConfig",
    "TransferItem",
    "ValidationResult",
    "Wallet",
    "WalletPnl",
]
