from __future__ import annotations

import asyncio
import logging

from .base import BaseOperation
from ..api import QuoteAction, QuoteComparison
from ..result import ApiResponse, ValidationResult
from ..validation import is_valid_amount

_LOG = logging.getLogger(__name__)


class RouteQuoteOperation(BaseOperation):
    """Read-only price quotes, nothing is signed or sent."""

    @staticmethod
    def validate(action: QuoteAction | str, token_mint_address: str, amount: float) -> ValidationResult:
        if not (isinstance(token_mint_address, str) and token_mint_address.strip()):
            return ValidationResult.fail("Token mint address is required")
        if not is_valid_amount(amount):
            return ValidationResult.fail("Amount must be greater than 0")
        if str(action) not in [item.value for item in QuoteAction]:
            return ValidationResult.fail('Action must be either "buy" or "sell"')
        return ValidationResult.ok()

    async def get_route_quote(
        self,
        action: QuoteAction | str,
        token_mint_address: str,
        amount: float,
        rpc_url: str | None = None,
    ) -> ApiResponse:
        return await self._run("route_quote", self._get_route_quote(action, token_mint_address, amount, rpc_url))

    async def _get_route_quote(
        self,
        action: QuoteAction | str,
        token_mint_address: str,
        amount: float,
        rpc_url: str | None,
    ) -> ApiResponse:
        if not (res := self.validate(action, token_mint_address, amount)):
            return ApiResponse.from_error(res.error)

        quote = await self._api_client.get_route_quote(action, token_mint_address, amount, rpc_url)
        _LOG.debug("route quote: %s", quote.summary)
        return ApiResponse(success=True, result=quote)

    async def get_buy_quote(self, token_mint_address: str, sol_amount: float, rpc_url: str | None = None) -> ApiResponse:
        return await self.get_route_quote(QuoteAction.Buy, token_mint_address, sol_amount, rpc_url)

    async def get_sell_quote(
        self,
        token_mint_address: str,
        token_amount: float,
        rpc_url: str | None = None,
    ) -> ApiResponse:
        return await self.get_route_quote(QuoteAction.Sell, token_mint_address, token_amount, rpc_url)

    async def compare_quotes(
        self,
        token_mint_address: str,
        sol_amount: float,
        token_amount: float,
        rpc_url: str | None = None,
    ) -> QuoteComparison:
        buy_res, sell_res = await asyncio.gather(
            self.get_buy_quote(token_mint_address, sol_amount, rpc_url),
            self.get_sell_quote(token_mint_address, token_amount, rpc_url),
        )
        return QuoteComparison(
            buy_quote=buy_res.result,
            sell_quote=sell_res.result,
            buy_error=buy_res.error,
            sell_error=sell_res.error,
        )
