from __future__ import annotations

import logging
from typing import Sequence

from common.config.constants import CREATE_BUNDLE_PAUSE_SEC, CREATE_CONFIG_PAUSE_SEC, MAX_CREATE_WALLET_CNT
from common.http.errors import BaseHttpError
from common.solana.errors import SolError
from common.solana.signer import SolSigner
from common.solana.signer_registry import SolSignerRegistry
from .base import BaseOperation
from ..api import BundleResult, Platform, TokenCreateConfig, Wallet
from ..bundle import Bundle
from ..errors import FuryError
from ..result import ApiResponse, ValidationResult
from ..validation import is_valid_amount, is_valid_wallet

_LOG = logging.getLogger(__name__)

_BUNDLE_FAILED_CODE = -1


class TokenCreateOperation(BaseOperation):
    """Launches a token: every bundle from the API is signed and sent on its own,
    a failed bundle is recorded as an error result and the rest still go out.
    """

    @staticmethod
    def validate(wallet_list: Sequence[Wallet], cfg: TokenCreateConfig) -> ValidationResult:
        if not wallet_list:
            return ValidationResult.fail("At least one wallet is required")
        if len(wallet_list) > MAX_CREATE_WALLET_CNT:
            return ValidationResult.fail(f"Maximum {MAX_CREATE_WALLET_CNT} wallets allowed")

        for idx, wallet in enumerate(wallet_list):
            if not is_valid_wallet(wallet):
                return ValidationResult.fail(f"Wallet {idx + 1}: Invalid private key format")

        if not cfg.platform:
            return ValidationResult.fail("Platform is required")

        supported_list = [item.value for item in Platform]
        if str(cfg.platform) not in supported_list:
            return ValidationResult.fail(
                f"Unsupported platform: {cfg.platform}. Supported platforms: {', '.join(supported_list)}"
            )

        if cfg.metadata is None:
            return ValidationResult.fail("Token metadata is required")
        if not (cfg.metadata.name and cfg.metadata.symbol and cfg.metadata.image):
            return ValidationResult.fail("Token name, symbol, and image are required")

        if isinstance(cfg.amounts, (list, tuple)):
            for idx, amount in enumerate(cfg.amounts):
                if not is_valid_amount(amount):
                    return ValidationResult.fail(f"Amount {idx + 1}: must be greater than 0")
        elif not is_valid_amount(cfg.amounts):
            return ValidationResult.fail("Amount must be greater than 0")

        if not cfg.wallets:
            return ValidationResult.fail("At least one wallet address is required")
        if len(cfg.wallets) != len(wallet_list):
            return ValidationResult.fail("Number of wallet addresses must match number of wallets")

        return ValidationResult.ok()

    async def create_token_single(self, wallet_list: Sequence[Wallet], cfg: TokenCreateConfig) -> ApiResponse:
        return await self._run("create", self._create_token_single(wallet_list, cfg))

    async def _create_token_single(self, wallet_list: Sequence[Wallet], cfg: TokenCreateConfig) -> ApiResponse:
        if not (res := self.validate(wallet_list, cfg)):
            return ApiResponse.from_error(res.error)

        _LOG.debug("create token %s (%s) on %s", cfg.metadata.name, cfg.metadata.symbol, cfg.platform)
        bundle_list = await self._api_client.get_create_bundle_list(cfg)
        if not bundle_list:
            return ApiResponse.from_error("No transaction bundles received from backend")

        primary = SolSigner.from_base58(wallet_list[0].private_key)
        registry = SolSignerRegistry.from_secret_list([wallet.private_key for wallet in wallet_list])

        result_list: list[BundleResult] = list()
        for idx, bundle in enumerate(bundle_list):
            _LOG.debug("process bundle %s/%s with %s transactions", idx + 1, len(bundle_list), len(bundle))
            try:
                signed_bundle = Bundle(self._sign_tx_list(bundle.tx_list, primary, registry))
                result = await self._submission.send_one(signed_bundle)
            except (SolError, BaseHttpError, FuryError) as exc:
                _LOG.warning("bundle %s/%s failed: %s", idx + 1, len(bundle_list), str(exc), extra=self._msg_filter)
                result = BundleResult.new_error(_BUNDLE_FAILED_CODE, str(exc))

            result_list.append(result)
            if idx < len(bundle_list) - 1:
                await self._pause(CREATE_BUNDLE_PAUSE_SEC)

        return ApiResponse(success=True, result=result_list)

    async def create_token_batch(
        self,
        item_list: Sequence[tuple[Sequence[Wallet], TokenCreateConfig]],
    ) -> ApiResponse:
        return await self._run("batch_create", self._create_token_batch(item_list))

    async def _create_token_batch(self, item_list: Sequence[tuple[Sequence[Wallet], TokenCreateConfig]]) -> ApiResponse:
        result_list: list[list[BundleResult]] = list()
        for idx, (wallet_list, cfg) in enumerate(item_list):
            res = await self.create_token_single(wallet_list, cfg)
            if res.success and res.result is not None:
                result_list.append(res.result)
            else:
                _LOG.warning("configuration %s failed: %s", idx + 1, res.error)
                result_list.append(list())

            if idx < len(item_list) - 1:
                await self._pause(CREATE_CONFIG_PAUSE_SEC)

        return ApiResponse(success=True, result=result_list)
