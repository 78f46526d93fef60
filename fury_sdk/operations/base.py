from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Sequence, TypeVar

from common.config.config import Config
from common.config.constants import LAMPORTS_PER_SOL
from common.config.utils import LogMsgFilter
from common.http.errors import BaseHttpError
from common.solana.errors import SolError
from common.solana.pubkey import SolPubKey
from common.solana.signer import SolSigner
from common.solana.signer_registry import SolSignerRegistry
from common.solana.tx_cosigner import SolTxCoSigner
from common.solana_rpc.client import SolClient
from common.utils.json_logger import logging_context
from ..api_client import FuryApiClient
from ..bundle import Bundle, assemble_bundle_list
from ..errors import FuryError
from ..result import ApiResponse, BatchResult, ResultAccumulator
from ..submission import SubmissionLoop

_LOG = logging.getLogger(__name__)

_Result = TypeVar("_Result", ApiResponse, BatchResult)


class BaseOperation:
    def __init__(
        self,
        cfg: Config,
        api_client: FuryApiClient,
        submission: SubmissionLoop,
        sol_client: SolClient | None = None,
    ) -> None:
        self._cfg = cfg
        self._msg_filter = LogMsgFilter(cfg)
        self._api_client = api_client
        self._submission = submission
        self._sol_client = sol_client

    async def _run(self, op_name: str, coro: Awaitable[_Result], result_type: type[_Result] = ApiResponse) -> _Result:
        """Public boundary of an operation: every known failure becomes an unsuccessful result."""
        with logging_context(op=op_name):
            try:
                return await coro
            except (SolError, BaseHttpError, FuryError) as exc:
                _LOG.warning("%s failed: %s", op_name, str(exc), extra=self._msg_filter)
                return result_type.from_error(str(exc))

    @staticmethod
    def _sign_tx_list(tx_list: Sequence[str], primary: SolSigner, registry: SolSignerRegistry) -> tuple[str, ...]:
        return SolTxCoSigner(primary, registry).complete_list(tx_list)

    async def _sign_and_submit(
        self,
        tx_list: Sequence[str],
        primary: SolSigner,
        registry: SolSignerRegistry,
        acc: ResultAccumulator | None = None,
    ) -> ResultAccumulator:
        # all transactions are signed before the first send
        signed_tx_list = self._sign_tx_list(tx_list, primary, registry)
        _LOG.debug("completed signing for %s transactions", len(signed_tx_list))

        bundle_list = assemble_bundle_list(signed_tx_list)
        _LOG.debug("prepared %s bundles", len(bundle_list))
        return await self._submission.submit(bundle_list, acc)

    async def _sign_and_submit_bundle_list(
        self,
        bundle_list: Sequence[Bundle],
        primary: SolSigner,
        registry: SolSignerRegistry,
    ) -> ResultAccumulator:
        signed_bundle_list = tuple(
            Bundle(self._sign_tx_list(bundle.tx_list, primary, registry)) for bundle in bundle_list
        )
        _LOG.debug("completed signing for %s bundles", len(signed_bundle_list))
        return await self._submission.submit(signed_bundle_list)

    async def _get_sol_balance(self, address: SolPubKey | str) -> float:
        if self._sol_client is None:
            raise FuryError("Balance check requires the Solana RPC client")
        lamports = await self._sol_client.get_balance(address)
        return lamports / LAMPORTS_PER_SOL

    @staticmethod
    async def _pause(sec: float) -> None:
        await asyncio.sleep(sec)
