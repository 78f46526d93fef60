from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from pydantic import Field
from strenum import StrEnum
from typing_extensions import Self

from common.jsonrpc.api import JsonRpcResp
from common.utils.pydantic import BaseModel, ResponseModel
from .errors import FuryRemoteError

_LOG = logging.getLogger(__name__)


class Protocol(StrEnum):
    PumpFun = "pumpfun"
    Moonshot = "moonshot"
    Launchpad = "launchpad"
    Raydium = "raydium"
    PumpSwap = "pumpswap"
    Jupiter = "jupiter"
    BoopFun = "boopfun"


class Platform(StrEnum):
    Pump = "pump"
    Moon = "moon"
    Bonk = "bonk"
    Cook = "cook"
    Boop = "boop"


class QuoteAction(StrEnum):
    Buy = "buy"
    Sell = "sell"


###################
# Caller-side inputs
#   plain dataclasses: validators report bad values instead of failing on construction


@dataclass(frozen=True)
class Wallet:
    private_key: str = field(repr=False)
    amount: str | None = None


@dataclass(frozen=True)
class TokenBuyConfig:
    token_address: str
    sol_amount: float
    protocol: Protocol | str
    slippage_bps: int | None = None
    jito_tip_lamports: int | None = None


@dataclass(frozen=True)
class TokenSellConfig:
    token_address: str
    sell_percent: float
    protocol: Protocol | str
    slippage_bps: int | None = None
    jito_tip_lamports: int | None = None


@dataclass(frozen=True)
class TokenMetadata:
    name: str
    symbol: str
    image: str
    description: str | None = None
    twitter: str | None = None
    telegram: str | None = None
    website: str | None = None
    decimals: int | None = None


@dataclass(frozen=True)
class TokenCreateConfig:
    platform: Platform | str
    metadata: TokenMetadata | None
    wallets: Sequence[str]
    amounts: Sequence[float] | float
    # passed as is: {"type": "meme", "rpcUrl": ..., "trading": {"slippageBps": ...}, "jito": {"tipAmount": ...}}
    platform_config: dict | None = None


@dataclass(frozen=True)
class TransferItem:
    receiver: str
    amount: str
    token_address: str | None = None


@dataclass(frozen=True)
class BurnItem:
    token_address: str
    amount: str


@dataclass(frozen=True)
class TokenCleanerConfig:
    """Seller sells a part of its balance, buyer buys it back in the same set of transactions."""

    token_address: str
    sell_percentage: float
    buy_percentage: float
    buy_amount: float


###################
# Wire requests


class RecipientModel(BaseModel):
    address: str
    amount: str


class DistributeRequest(BaseModel):
    sender: str
    recipient_list: list[RecipientModel] = Field(serialization_alias="recipients")


class ConsolidateRequest(BaseModel):
    source_address_list: list[str] = Field(serialization_alias="sourceAddresses")
    receiver_address: str = Field(serialization_alias="receiverAddress")
    percentage: float


class TokenBuyRequest(BaseModel):
    wallet_address_list: list[str] = Field(serialization_alias="walletAddresses")
    token_address: str = Field(serialization_alias="tokenAddress")
    protocol: Protocol
    sol_amount: float = Field(serialization_alias="solAmount")
    amount_list: list[float] | None = Field(None, serialization_alias="amounts")
    slippage_bps: int = Field(serialization_alias="slippageBps")
    jito_tip_lamports: int = Field(serialization_alias="jitoTipLamports")


class TokenSellRequest(BaseModel):
    wallet_address_list: list[str] = Field(serialization_alias="walletAddresses")
    token_address: str = Field(serialization_alias="tokenAddress")
    protocol: Protocol
    percentage: float
    slippage_bps: int = Field(serialization_alias="slippageBps")
    jito_tip_lamports: int = Field(serialization_alias="jitoTipLamports")


class TokenMetadataModel(BaseModel):
    name: str
    symbol: str
    image: str
    description: str | None = None
    twitter: str | None = None
    telegram: str | None = None
    website: str | None = None
    decimals: int | None = None


class TokenCreateRequest(BaseModel):
    platform: Platform
    metadata: TokenMetadataModel
    wallet_list: list[str] = Field(serialization_alias="wallets")
    amounts: list[float] | float
    platform_config: dict | None = Field(None, serialization_alias="platformConfig")


class TransferRequest(BaseModel):
    sender_public_key: str = Field(serialization_alias="senderPublicKey")
    receiver: str
    token_address: str | None = Field(None, serialization_alias="tokenAddress")
    amount: str


class BurnRequest(BaseModel):
    wallet_public_key: str = Field(serialization_alias="walletPublicKey")
    token_address: str = Field(serialization_alias="tokenAddress")
    amount: str


class RouteQuoteRequest(BaseModel):
    action: QuoteAction
    token_mint_address: str = Field(serialization_alias="tokenMintAddress")
    amount: float
    rpc_url: str = Field(serialization_alias="rpcUrl")


class TokenCleanerRequest(BaseModel):
    seller_address: str = Field(serialization_alias="sellerAddress")
    buyer_address: str = Field(serialization_alias="buyerAddress")
    token_address: str = Field(serialization_alias="tokenAddress")
    sell_percentage: float = Field(serialization_alias="sellPercentage")
    buy_percentage: float = Field(serialization_alias="buyPercentage")
    wallet_address_list: list[str] = Field(serialization_alias="walletAddresses")
    buy_amount: float = Field(serialization_alias="buyAmount")


class PnlOptionsModel(BaseModel):
    include_timestamp: bool = Field(serialization_alias="includeTimestamp")


class PnlRequest(BaseModel):
    # comma-separated list of wallet addresses
    addresses: str
    token_address: str = Field(serialization_alias="tokenAddress")
    options: PnlOptionsModel


class SendTxRequest(BaseModel):
    tx_list: list[str] = Field(serialization_alias="transactions")
    use_rpc: bool | None = Field(None, serialization_alias="useRpc")


###################
# Responses


class RouteQuote(ResponseModel):
    success: bool = True
    action: QuoteAction
    protocol: str
    token_mint_address: str = Field(validation_alias="tokenMintAddress")
    input_amount: float = Field(validation_alias="inputAmount")
    output_amount: str | int | float = Field(validation_alias="outputAmount")

    @property
    def output_amount_as_number(self) -> float:
        return float(self.output_amount)

    @property
    def exchange_rate(self) -> float:
        if self.input_amount <= 0:
            return 0.0
        return self.output_amount_as_number / self.input_amount

    @property
    def is_buy(self) -> bool:
        return self.action == QuoteAction.Buy

    @property
    def is_sell(self) -> bool:
        return self.action == QuoteAction.Sell

    @property
    def summary(self) -> str:
        rate = self.exchange_rate
        output = self.output_amount_as_number
        if self.is_buy:
            return (
                f"Buy {self.input_amount} SOL -> {output:,.0f} tokens "
                f"(Rate: {rate:.2f} tokens/SOL) via {self.protocol}"
            )
        return (
            f"Sell {self.input_amount:,} tokens -> {output:,.0f} lamports "
            f"(Rate: {rate:.2f} lamports/token) via {self.protocol}"
        )


class WalletPnl(ResponseModel):
    profit: float
    timestamp: str | None = None


@dataclass(frozen=True)
class QuoteComparison:
    buy_quote: RouteQuote | None
    sell_quote: RouteQuote | None
    buy_error: str | None = None
    sell_error: str | None = None

    @property
    def buy_success(self) -> bool:
        return self.buy_quote is not None

    @property
    def sell_success(self) -> bool:
        return self.sell_quote is not None

    @property
    def comparison(self) -> str | None:
        if not (self.buy_quote and self.sell_quote):
            return None
        return (
            f"Buy: {self.buy_quote.exchange_rate:.2f} tokens/SOL | "
            f"Sell: {self.sell_quote.exchange_rate:.2f} lamports/token"
        )


class BundleResultKind(StrEnum):
    Jito = "jito"
    Rpc = "rpc"
    JsonRpc = "jsonrpc"
    Error = "error"


@dataclass(frozen=True)
class BundleResult:
    """Outcome of one broadcast call, normalized from the shapes the endpoint can return."""

    kind: BundleResultKind
    bundle_id: str | None = None
    signature_list: tuple[str, ...] = tuple()
    result: Any = None
    code: int | None = None
    message: str | None = None

    @classmethod
    def new_jito(cls, bundle_id: str) -> Self:
        return cls(kind=BundleResultKind.Jito, bundle_id=bundle_id)

    @classmethod
    def new_rpc(cls, signature_list: Sequence[str]) -> Self:
        return cls(kind=BundleResultKind.Rpc, signature_list=tuple(signature_list))

    @classmethod
    def new_jsonrpc(cls, result: Any) -> Self:
        return cls(kind=BundleResultKind.JsonRpc, result=result)

    @classmethod
    def new_error(cls, code: int, message: str) -> Self:
        return cls(kind=BundleResultKind.Error, code=code, message=message)

    @classmethod
    def from_raw(cls, data: Any) -> Self:
        """Any 2xx object body means the bundle was accepted, only `success: false` is a failure."""
        if not isinstance(data, dict):
            raise FuryRemoteError("Unexpected broadcast response")

        if "jsonrpc" in data:
            return cls._from_jsonrpc(data)

        if ("success" in data) and (not data["success"]):
            raise FuryRemoteError(str(data.get("error") or "Failed to send bundle"))

        result = data.get("result", None)
        if isinstance(result, dict):
            if isinstance(jito := result.get("jito", None), str):
                return cls.new_jito(jito)
            elif isinstance(sig_list := result.get("rpc", None), list):
                return cls.new_rpc([str(sig) for sig in sig_list])
            elif "jsonrpc" in result:
                return cls._from_jsonrpc(result)

        # unknown shape of an accepted broadcast, keep it as is
        return cls.new_jsonrpc(data if result is None else result)

    @classmethod
    def _from_jsonrpc(cls, data: dict) -> Self:
        try:
            resp = JsonRpcResp.from_dict(data)
        except ValueError:
            _LOG.warning("broadcast answer is not a valid JSON-RPC envelope: %s", data)
            return cls.new_jsonrpc(data)

        if resp.is_error:
            return cls.new_error(resp.error.code, resp.error.message)
        return cls.new_jsonrpc(resp.result)

    @property
    def is_ok(self) -> bool:
        return self.kind != BundleResultKind.Error

    def to_dict(self) -> dict:
        if self.kind == BundleResultKind.Jito:
            return dict(kind=self.kind.value, bundleId=self.bundle_id)
        elif self.kind == BundleResultKind.Rpc:
            return dict(kind=self.kind.value, signatures=list(self.signature_list))
        elif self.kind == BundleResultKind.JsonRpc:
            return dict(kind=self.kind.value, result=self.result)
        return dict(kind=self.kind.value, error=dict(code=self.code, message=self.message))
