from __future__ import annotations

import logging
from typing import Mapping, Sequence

from typing_extensions import Self

from common.config.config import Config
from common.config.constants import LAMPORTS_PER_SOL
from common.http.errors import BaseHttpError
from common.solana.errors import SolError
from common.solana.signer import SolSigner
from common.solana_rpc.client import SolClient
from common.utils.json_logger import Logger
from .api import (
    BurnItem,
    QuoteAction,
    QuoteComparison,
    TokenBuyConfig,
    TokenCleanerConfig,
    TokenCreateConfig,
    TokenSellConfig,
    TransferItem,
    Wallet,
)
from .api_client import FuryApiClient
from .errors import FuryError
from .operations.analytics import AnalyticsOperation
from .operations.burn import BurnOperation
from .operations.consolidate import ConsolidateOperation
from .operations.distribute import DistributeOperation
from .operations.mixer import MixerOperation
from .operations.route_quote import RouteQuoteOperation
from .operations.token_buy import TokenBuyOperation
from .operations.token_cleaner import TokenCleanerOperation
from .operations.token_create import TokenCreateOperation
from .operations.token_sell import TokenSellOperation
from .operations.transfer import TransferOperation
from .rate_limiter import RateLimiter
from .result import ApiResponse, BatchResult, ValidationResult
from .submission import SubmissionLoop

_LOG = logging.getLogger(__name__)


class FurySdk:
    """Entry point of the SDK.

    One instance owns its config, HTTP sessions and rate limiter,
    so several instances with different settings can live in one process.

        async with FurySdk(Config(api_url="https://...")) as sdk:
            res = await sdk.distribute_sol(sender, recipient_list)

    The SDK doesn't configure handlers, the application calls `FurySdk.setup_logging()` once.
    With `json_format=True` records are rendered as JSON lines with the `op` context field.
    """

    def __init__(
        self,
        cfg: Config | None = None,
        *,
        api_client: FuryApiClient | None = None,
        rate_limiter: RateLimiter | None = None,
        sol_client: SolClient | None = None,
    ) -> None:
        self._cfg = cfg or Config()
        if self._cfg.debug:
            Logger.enable_debug(["fury_sdk", "common"])

        self._api_client = api_client or FuryApiClient(self._cfg)
        self._sol_client = sol_client or SolClient(self._cfg)
        self._rate_limiter = rate_limiter or RateLimiter.from_config(self._cfg)
        self._submission = SubmissionLoop(self._cfg, self._api_client, self._rate_limiter)

        op_args = (self._cfg, self._api_client, self._submission, self._sol_client)
        self._distribute = DistributeOperation(*op_args)
        self._mixer = MixerOperation(*op_args)
        self._consolidate = ConsolidateOperation(*op_args)
        self._token_buy = TokenBuyOperation(*op_args)
        self._token_sell = TokenSellOperation(*op_args)
        self._token_create = TokenCreateOperation(*op_args)
        self._transfer = TransferOperation(*op_args)
        self._burn = BurnOperation(*op_args)
        self._route_quote = RouteQuoteOperation(*op_args)
        self._token_cleaner = TokenCleanerOperation(*op_args)
        self._analytics = AnalyticsOperation(*op_args)

    @staticmethod
    def setup_logging(level: str = "INFO", *, json_format: bool = False) -> None:
        Logger.setup(level, json_format=json_format)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._api_client.stop()
        await self._sol_client.stop()

    @property
    def config(self) -> Config:
        return self._cfg

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    ###################
    # Distribute

    @staticmethod
    def validate_distribution(
        sender: Wallet,
        recipient_list: Sequence[Wallet],
        sender_balance: float | None = None,
    ) -> ValidationResult:
        return DistributeOperation.validate(sender, recipient_list, sender_balance)

    async def distribute_sol(
        self,
        sender: Wallet,
        recipient_list: Sequence[Wallet],
        *,
        check_balance: bool = False,
    ) -> ApiResponse:
        return await self._distribute.distribute_sol(sender, recipient_list, check_balance=check_balance)

    async def batch_distribute_sol(self, sender: Wallet, recipient_list: Sequence[Wallet]) -> BatchResult:
        return await self._distribute.batch_distribute_sol(sender, recipient_list)

    ###################
    # Mixer

    @staticmethod
    def validate_single_mixing(
        sender: Wallet,
        recipient: Wallet,
        sender_balance: float | None = None,
    ) -> ValidationResult:
        return MixerOperation.validate_single(sender, recipient, sender_balance)

    @staticmethod
    def validate_mixing(
        sender: Wallet,
        recipient_list: Sequence[Wallet],
        sender_balance: float | None = None,
    ) -> ValidationResult:
        return MixerOperation.validate(sender, recipient_list, sender_balance)

    async def mix_sol_to_single_recipient(
        self,
        sender: Wallet,
        recipient: Wallet,
        *,
        check_balance: bool = False,
    ) -> ApiResponse:
        return await self._mixer.mix_sol_to_single_recipient(sender, recipient, check_balance=check_balance)

    async def batch_mix_sol(
        self,
        sender: Wallet,
        recipient_list: Sequence[Wallet],
        *,
        check_balance: bool = False,
    ) -> BatchResult:
        return await self._mixer.batch_mix_sol(sender, recipient_list, check_balance=check_balance)

    ###################
    # Consolidate

    @staticmethod
    def validate_consolidation(
        source_list: Sequence[Wallet],
        receiver: Wallet,
        percentage: float,
        source_balance_dict: Mapping[str, float] | None = None,
    ) -> ValidationResult:
        return ConsolidateOperation.validate(source_list, receiver, percentage, source_balance_dict)

    async def consolidate_sol(
        self,
        source_list: Sequence[Wallet],
        receiver: Wallet,
        percentage: float,
        *,
        check_balance: bool = False,
    ) -> ApiResponse:
        return await self._consolidate.consolidate_sol(source_list, receiver, percentage, check_balance=check_balance)

    ###################
    # Trading

    @staticmethod
    def validate_token_buy(wallet_list: Sequence[Wallet], cfg: TokenBuyConfig) -> ValidationResult:
        return TokenBuyOperation.validate(wallet_list, cfg)

    async def buy_token_single(self, wallet: Wallet, cfg: TokenBuyConfig) -> ApiResponse:
        return await self._token_buy.buy_token_single(wallet, cfg)

    async def buy_token_batch(
        self,
        wallet_list: Sequence[Wallet],
        cfg: TokenBuyConfig,
        amount_list: Sequence[float] | None = None,
    ) -> ApiResponse:
        return await self._token_buy.buy_token_batch(wallet_list, cfg, amount_list)

    @staticmethod
    def validate_token_sell(
        wallet_list: Sequence[Wallet],
        cfg: TokenSellConfig,
        percent_list: Sequence[float] | None = None,
    ) -> ValidationResult:
        return TokenSellOperation.validate(wallet_list, cfg, percent_list)

    async def sell_token_single(self, wallet: Wallet, cfg: TokenSellConfig) -> ApiResponse:
        return await self._token_sell.sell_token_single(wallet, cfg)

    async def sell_token_batch(
        self,
        wallet_list: Sequence[Wallet],
        cfg: TokenSellConfig,
        percent_list: Sequence[float] | None = None,
    ) -> ApiResponse:
        return await self._token_sell.sell_token_batch(wallet_list, cfg, percent_list)

    ###################
    # Token creation

    @staticmethod
    def validate_token_create(wallet_list: Sequence[Wallet], cfg: TokenCreateConfig) -> ValidationResult:
        return TokenCreateOperation.validate(wallet_list, cfg)

    async def create_token_single(self, wallet_list: Sequence[Wallet], cfg: TokenCreateConfig) -> ApiResponse:
        return await self._token_create.create_token_single(wallet_list, cfg)

    async def create_token_batch(
        self,
        item_list: Sequence[tuple[Sequence[Wallet], TokenCreateConfig]],
    ) -> ApiResponse:
        return await self._token_create.create_token_batch(item_list)

    ###################
    # Transfer

    @staticmethod
    def validate_transfer(
        sender: Wallet,
        receiver: str,
        amount: str,
        token_address: str | None = None,
    ) -> ValidationResult:
        return TransferOperation.validate(sender, receiver, amount, token_address)

    async def transfer_tokens(
        self,
        sender: Wallet,
        receiver: str,
        amount: str,
        token_address: str | None = None,
    ) -> ApiResponse:
        return await self._transfer.transfer_tokens(sender, receiver, amount, token_address)

    async def transfer_sol(self, sender: Wallet, receiver: str, amount: str) -> ApiResponse:
        return await self._transfer.transfer_sol(sender, receiver, amount)

    async def transfer_token(self, sender: Wallet, receiver: str, token_address: str, amount: str) -> ApiResponse:
        return await self._transfer.transfer_token(sender, receiver, token_address, amount)

    async def batch_transfer(self, sender: Wallet, item_list: Sequence[TransferItem]) -> BatchResult:
        return await self._transfer.batch_transfer(sender, item_list)

    ###################
    # Burn

    @staticmethod
    def validate_burn(wallet: Wallet, token_address: str, amount: str) -> ValidationResult:
        return BurnOperation.validate(wallet, token_address, amount)

    async def burn_token(self, wallet: Wallet, token_address: str, amount: str) -> ApiResponse:
        return await self._burn.burn_token(wallet, token_address, amount)

    async def batch_burn_token(self, wallet: Wallet, item_list: Sequence[BurnItem]) -> BatchResult:
        return await self._burn.batch_burn_token(wallet, item_list)

    ###################
    # Token cleaner

    @staticmethod
    def validate_token_cleaner(seller: Wallet, buyer: Wallet, cfg: TokenCleanerConfig) -> ValidationResult:
        return TokenCleanerOperation.validate(seller, buyer, cfg)

    async def clean_token(self, seller: Wallet, buyer: Wallet, cfg: TokenCleanerConfig) -> ApiResponse:
        return await self._token_cleaner.clean_token(seller, buyer, cfg)

    ###################
    # Analytics

    @staticmethod
    def validate_pnl(address_list: Sequence[str], token_address: str) -> ValidationResult:
        return AnalyticsOperation.validate(address_list, token_address)

    async def get_pnl(
        self,
        address_list: Sequence[str],
        token_address: str,
        include_timestamp: bool = True,
    ) -> ApiResponse:
        return await self._analytics.get_pnl(address_list, token_address, include_timestamp)

    ###################
    # Quotes

    @staticmethod
    def validate_route_quote(action: QuoteAction | str, token_mint_address: str, amount: float) -> ValidationResult:
        return RouteQuoteOperation.validate(action, token_mint_address, amount)

    async def get_route_quote(
        self,
        action: QuoteAction | str,
        token_mint_address: str,
        amount: float,
        rpc_url: str | None = None,
    ) -> ApiResponse:
        return await self._route_quote.get_route_quote(action, token_mint_address, amount, rpc_url)

    async def get_buy_quote(self, token_mint_address: str, sol_amount: float, rpc_url: str | None = None) -> ApiResponse:
        return await self._route_quote.get_buy_quote(token_mint_address, sol_amount, rpc_url)

    async def get_sell_quote(
        self,
        token_mint_address: str,
        token_amount: float,
        rpc_url: str | None = None,
    ) -> ApiResponse:
        return await self._route_quote.get_sell_quote(token_mint_address, token_amount, rpc_url)

    async def compare_quotes(
        self,
        token_mint_address: str,
        sol_amount: float,
        token_amount: float,
        rpc_url: str | None = None,
    ) -> QuoteComparison:
        return await self._route_quote.compare_quotes(token_mint_address, sol_amount, token_amount, rpc_url)

    ###################
    # Helpers

    @staticmethod
    def get_wallet_address(secret: str) -> str:
        return SolSigner.from_base58(secret).to_string()

    async def get_wallet_balance(self, wallet: Wallet | str) -> float:
        """Balance in SOL, the wallet is either a Wallet with the secret or a public address."""
        if isinstance(wallet, Wallet):
            address = SolSigner.from_base58(wallet.private_key).pubkey
        else:
            address = wallet
        lamports = await self._sol_client.get_balance(address)
        return lamports / LAMPORTS_PER_SOL

    async def health_check(self) -> ApiResponse:
        try:
            return ApiResponse(success=True, result=await self._api_client.health_check())
        except (BaseHttpError, FuryError) as exc:
            return ApiResponse.from_error(str(exc))

    async def generate_mint(self) -> ApiResponse:
        try:
            return ApiResponse(success=True, result=await self._api_client.generate_mint())
        except (BaseHttpError, FuryError) as exc:
            return ApiResponse.from_error(str(exc))

    async def send_transaction(self, tx_list: Sequence[str], use_rpc: bool = False) -> ApiResponse:
        try:
            return ApiResponse(success=True, result=await self._api_client.send_transaction(tx_list, use_rpc))
        except (SolError, BaseHttpError, FuryError) as exc:
            _LOG.warning("send transaction failed: %s", str(exc))
            return ApiResponse.from_error(str(exc))
