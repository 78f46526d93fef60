from __future__ import annotations

import logging
from typing import Any, Sequence, TypeVar

from pydantic import ValidationError

from common.config.config import Config
from common.config.constants import DEFAULT_SLIPPAGE_BPS, DEFAULT_JITO_TIP_LAMPORTS
from common.http.client import HttpClient
from common.http.errors import HttpResponseFormatError
from common.utils.json_logger import log_msg
from common.utils.pydantic import BaseModel
from .api import (
    BundleResult,
    BurnRequest,
    ConsolidateRequest,
    DistributeRequest,
    Platform,
    PnlOptionsModel,
    PnlRequest,
    Protocol,
    QuoteAction,
    RecipientModel,
    RouteQuote,
    RouteQuoteRequest,
    SendTxRequest,
    TokenBuyConfig,
    TokenBuyRequest,
    TokenCleanerConfig,
    TokenCleanerRequest,
    TokenCreateConfig,
    TokenCreateRequest,
    TokenMetadataModel,
    TokenSellConfig,
    TokenSellRequest,
    TransferRequest,
    WalletPnl,
)
from .bundle import Bundle, assemble_bundle_list
from .errors import FuryRemoteError, FuryValidationError
from .submission import BundleSender

_LOG = logging.getLogger(__name__)

_RequestModel = TypeVar("_RequestModel", bound=BaseModel)


class FuryApiClient(HttpClient, BundleSender):
    """Client of the remote trading API: fetches prepared transactions and broadcasts signed bundles."""

    def __init__(self, cfg: Config) -> None:
        super().__init__(cfg)
        self.connect(base_url=cfg.api_url)

    async def _post_api(self, path: str, request: BaseModel, default_error: str) -> Any:
        payload = request.to_dict()
        _LOG.debug(log_msg("request {Path}: {Payload}", Path=path, Payload=payload), extra=self._msg_filter)

        data = await self._post_json(path, payload)
        _LOG.debug(log_msg("response {Path}: {Data}", Path=path, Data=data), extra=self._msg_filter)

        self._check_success(data, default_error)
        return data

    @staticmethod
    def _check_success(data: Any, default_error: str) -> None:
        if isinstance(data, dict) and (not data.get("success", False)):
            raise FuryRemoteError(str(data.get("error", None) or default_error))

    @staticmethod
    def _new_request(request_type: type[_RequestModel], **kwargs) -> _RequestModel:
        try:
            return request_type(**kwargs)
        except ValidationError as exc:
            raise FuryValidationError.from_pydantic(request_type.__name__, exc) from exc

    @staticmethod
    def _is_tx_list(value: Any) -> bool:
        return isinstance(value, list) and all(isinstance(tx, str) for tx in value)

    @classmethod
    def _parse_tx_list(cls, data: Any) -> tuple[str, ...]:
        if cls._is_tx_list(data):
            return tuple(data)
        elif isinstance(data, dict):
            if cls._is_tx_list(tx_list := data.get("transactions", None)):
                return tuple(tx_list)
            elif isinstance(nested := data.get("data", None), dict):
                if cls._is_tx_list(tx_list := nested.get("transactions", None)):
                    return tuple(tx_list)

        raise FuryRemoteError("No transactions returned from backend")

    @classmethod
    def _parse_bundle_list(cls, data: Any) -> tuple[Bundle, ...]:
        if isinstance(data, dict) and isinstance(raw_bundle_list := data.get("bundles", None), list):
            bundle_list: list[Bundle] = list()
            for raw_bundle in raw_bundle_list:
                if isinstance(raw_bundle, dict):
                    raw_bundle = raw_bundle.get("transactions", None)
                if not cls._is_tx_list(raw_bundle):
                    raise FuryRemoteError("Invalid bundle format in the backend response")
                if not raw_bundle:
                    _LOG.warning("skip empty bundle from the backend")
                    continue
                bundle_list.append(Bundle(tuple(raw_bundle)))
            return tuple(bundle_list)

        # flat list: chunk it into bundles on the client side
        tx_list = cls._parse_tx_list(data)
        bundle_list = assemble_bundle_list(tx_list)
        _LOG.debug("split %s transactions into %s bundles", len(tx_list), len(bundle_list))
        return bundle_list

    @staticmethod
    def _parse_nested_tx_list(data: Any) -> tuple[str, ...]:
        tx_list = None
        if isinstance(data, dict) and isinstance(nested := data.get("data", None), dict):
            tx_list = nested.get("transactions", None)

        if (not isinstance(tx_list, list)) or (not tx_list) or (not all(isinstance(tx, str) for tx in tx_list)):
            raise FuryRemoteError("No transactions received from API")
        return tuple(tx_list)

    ###################
    # Broadcast

    async def send_bundle(self, tx_list: Sequence[str]) -> BundleResult:
        return await self._send_tx_list(self._new_request(SendTxRequest, tx_list=list(tx_list)))

    async def send_transaction(self, tx_list: Sequence[str], use_rpc: bool = False) -> BundleResult:
        if not tx_list:
            raise FuryValidationError("No transactions to send")
        return await self._send_tx_list(self._new_request(SendTxRequest, tx_list=list(tx_list), use_rpc=use_rpc))

    async def _send_tx_list(self, request: SendTxRequest) -> BundleResult:
        path = "/api/transactions/send"
        _LOG.debug("send %s transactions to %s", len(request.tx_list), path)
        data = await self._post_json(path, request.to_dict())
        _LOG.debug(log_msg("broadcast response: {Data}", Data=data), extra=self._msg_filter)
        return BundleResult.from_raw(data)

    ###################
    # SOL movements

    async def get_distribute_tx_list(self, sender: str, recipient_list: Sequence[RecipientModel]) -> tuple[str, ...]:
        request = self._new_request(DistributeRequest, sender=sender, recipient_list=list(recipient_list))
        data = await self._post_api("/api/wallets/distribute", request, "Failed to get partially signed transactions")
        return self._parse_tx_list(data)

    async def get_mixer_tx_list(self, sender: str, recipient_list: Sequence[RecipientModel]) -> tuple[str, ...]:
        request = self._new_request(DistributeRequest, sender=sender, recipient_list=list(recipient_list))
        data = await self._post_api("/api/wallets/mixer", request, "Failed to get partially signed transactions")
        return self._parse_tx_list(data)

    async def get_consolidate_tx_list(
        self,
        source_address_list: Sequence[str],
        receiver_address: str,
        percentage: float,
    ) -> tuple[str, ...]:
        request = self._new_request(
            ConsolidateRequest,
            source_address_list=list(source_address_list),
            receiver_address=receiver_address,
            percentage=float(percentage),
        )
        data = await self._post_api("/api/wallets/consolidate", request, "Failed to get partially prepared transactions")
        return self._parse_tx_list(data)

    ###################
    # Trading

    async def get_buy_bundle_list(
        self,
        wallet_address_list: Sequence[str],
        cfg: TokenBuyConfig,
        amount_list: Sequence[float] | None = None,
    ) -> tuple[Bundle, ...]:
        request = self._new_request(
            TokenBuyRequest,
            wallet_address_list=list(wallet_address_list),
            token_address=cfg.token_address,
            protocol=Protocol(cfg.protocol),
            sol_amount=float(cfg.sol_amount),
            amount_list=[float(v) for v in amount_list] if amount_list else None,
            slippage_bps=cfg.slippage_bps or DEFAULT_SLIPPAGE_BPS,
            jito_tip_lamports=cfg.jito_tip_lamports or DEFAULT_JITO_TIP_LAMPORTS,
        )
        data = await self._post_api("/api/tokens/buy", request, "Failed to get token buy transactions")
        return self._parse_bundle_list(data)

    async def get_sell_bundle_list(
        self,
        wallet_address_list: Sequence[str],
        cfg: TokenSellConfig,
        percentage: float | None = None,
    ) -> tuple[Bundle, ...]:
        request = self._new_request(
            TokenSellRequest,
            wallet_address_list=list(wallet_address_list),
            token_address=cfg.token_address,
            protocol=Protocol(cfg.protocol),
            percentage=float(percentage or cfg.sell_percent),
            slippage_bps=cfg.slippage_bps or DEFAULT_SLIPPAGE_BPS,
            jito_tip_lamports=cfg.jito_tip_lamports or DEFAULT_JITO_TIP_LAMPORTS,
        )
        data = await self._post_api("/api/tokens/sell", request, "Failed to get token sell transactions")
        return self._parse_bundle_list(data)

    async def get_create_bundle_list(self, cfg: TokenCreateConfig) -> tuple[Bundle, ...]:
        metadata = cfg.metadata
        if isinstance(cfg.amounts, (int, float)):
            amounts = float(cfg.amounts)
        else:
            amounts = [float(v) for v in cfg.amounts]

        request = self._new_request(
            TokenCreateRequest,
            platform=Platform(cfg.platform),
            metadata=self._new_request(
                TokenMetadataModel,
                name=metadata.name,
                symbol=metadata.symbol,
                image=metadata.image,
                description=metadata.description,
                twitter=metadata.twitter,
                telegram=metadata.telegram,
                website=metadata.website,
                decimals=metadata.decimals,
            ),
            wallet_list=list(cfg.wallets),
            amounts=amounts,
            platform_config=cfg.platform_config,
        )
        data = await self._post_api("/api/create", request, "Failed to get token creation transactions")
        return self._parse_bundle_list(data)

    async def get_transfer_tx_list(
        self,
        sender_address: str,
        receiver: str,
        amount: str,
        token_address: str | None = None,
    ) -> tuple[str, ...]:
        request = self._new_request(
            TransferRequest,
            sender_public_key=sender_address,
            receiver=receiver,
            token_address=token_address or None,
            amount=str(amount),
        )
        data = await self._post_api("/api/tokens/transfer", request, "Failed to get partially prepared transactions")
        return self._parse_nested_tx_list(data)

    async def get_burn_tx_list(self, wallet_address: str, token_address: str, amount: str) -> tuple[str, ...]:
        request = self._new_request(
            BurnRequest, wallet_public_key=wallet_address, token_address=token_address, amount=str(amount)
        )
        data = await self._post_api("/api/tokens/burn", request, "Failed to get partially prepared transactions")
        return self._parse_nested_tx_list(data)

    async def get_route_quote(
        self,
        action: QuoteAction | str,
        token_mint_address: str,
        amount: float,
        rpc_url: str | None = None,
    ) -> RouteQuote:
        request = self._new_request(
            RouteQuoteRequest,
            action=QuoteAction(action),
            token_mint_address=token_mint_address,
            amount=float(amount),
            rpc_url=rpc_url or self._cfg.rpc_url,
        )
        data = await self._post_api("/api/tokens/route", request, "Failed to get route quote")
        try:
            return RouteQuote.from_dict(data)
        except ValidationError as exc:
            raise HttpResponseFormatError.from_pydantic("Wrong route quote response", exc) from exc

    async def get_cleaner_tx_list(
        self,
        seller_address: str,
        buyer_address: str,
        wallet_address_list: Sequence[str],
        cfg: TokenCleanerConfig,
    ) -> tuple[str, ...]:
        request = self._new_request(
            TokenCleanerRequest,
            seller_address=seller_address,
            buyer_address=buyer_address,
            token_address=cfg.token_address,
            sell_percentage=float(cfg.sell_percentage),
            buy_percentage=float(cfg.buy_percentage),
            wallet_address_list=list(wallet_address_list),
            buy_amount=float(cfg.buy_amount),
        )
        data = await self._post_api("/api/tokens/cleaner", request, "Failed to get token cleaner transactions")
        return self._parse_tx_list(data)

    ###################
    # Analytics

    async def get_pnl(
        self,
        address_list: Sequence[str],
        token_address: str,
        include_timestamp: bool = True,
    ) -> dict[str, WalletPnl]:
        request = self._new_request(
            PnlRequest,
            addresses=",".join(address_list),
            token_address=token_address,
            options=self._new_request(PnlOptionsModel, include_timestamp=include_timestamp),
        )
        data = await self._post_api("/api/analytics/pnl", request, "Failed to get PnL analytics")

        pnl_data = data.get("data", None) if isinstance(data, dict) else None
        if not isinstance(pnl_data, dict):
            raise FuryRemoteError("No PnL data received from API")
        try:
            return {address: WalletPnl.from_dict(value) for address, value in pnl_data.items()}
        except ValidationError as exc:
            raise HttpResponseFormatError.from_pydantic("Wrong PnL response", exc) from exc

    ###################
    # Utilities

    async def health_check(self) -> dict:
        data = await self._get_json("/health")
        if not isinstance(data, dict):
            raise FuryRemoteError("Unexpected health check response")
        return data

    async def generate_mint(self) -> dict:
        data = await self._get_json("/api/utilities/generate-mint")
        if not isinstance(data, dict):
            raise FuryRemoteError("Unexpected generate mint response")
        elif "success" in data:
            self._check_success(data, "Failed to generate mint")
        return data
