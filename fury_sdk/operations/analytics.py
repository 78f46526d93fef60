from __future__ import annotations

import logging
from typing import Sequence

from .base import BaseOperation
from ..result import ApiResponse, ValidationResult
from ..validation import is_valid_address_len, short_address

_LOG = logging.getLogger(__name__)


class AnalyticsOperation(BaseOperation):
    @staticmethod
    def validate(address_list: Sequence[str], token_address: str) -> ValidationResult:
        if not address_list:
            return ValidationResult.fail("No wallet addresses provided")
        for address in address_list:
            if not is_valid_address_len(address):
                return ValidationResult.fail(f"Invalid wallet address: {short_address(str(address))}")
        if not is_valid_address_len(token_address):
            return ValidationResult.fail("Invalid token address format")
        return ValidationResult.ok()

    async def get_pnl(
        self,
        address_list: Sequence[str],
        token_address: str,
        include_timestamp: bool = True,
    ) -> ApiResponse:
        """Profit and loss per wallet address for one token, nothing is signed or sent."""
        return await self._run("pnl", self._get_pnl(address_list, token_address, include_timestamp))

    async def _get_pnl(self, address_list: Sequence[str], token_address: str, include_timestamp: bool) -> ApiResponse:
        if not (res := self.validate(address_list, token_address)):
            return ApiResponse.from_error(res.error)

        pnl_dict = await self._api_client.get_pnl(address_list, token_address, include_timestamp)
        _LOG.debug("received PnL for %s of %s wallets", len(pnl_dict), len(address_list))
        return ApiResponse(success=True, result=pnl_dict)
