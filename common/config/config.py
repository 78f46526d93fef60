from __future__ import annotations

import logging
import os
from decimal import Decimal
from typing import Final

from .constants import (
    DEFAULT_API_URL,
    DEFAULT_RPC_URL,
    DEFAULT_MAX_BUNDLES_PER_SEC,
    DEFAULT_RATE_LIMIT_DELAY_MSEC,
    DEFAULT_MAX_RECIPIENTS_PER_BATCH,
)
from ..utils.cached import cached_property

_LOG = logging.getLogger(__name__)


class Config:
    hide_sensitive_info_name: Final[str] = "HIDE_SENSITIVE_INFO"
    debug_name: Final[str] = "FURY_DEBUG"
    # Remote API configuration
    api_url_name: Final[str] = "FURY_API_URL"
    timeout_sec_name: Final[str] = "FURY_TIMEOUT_SEC"
    # Solana RPC configuration
    rpc_url_name: Final[str] = "SOLANA_RPC_URL"
    # Submission settings
    max_bundles_per_sec_name: Final[str] = "MAX_BUNDLES_PER_SECOND"
    rate_limit_delay_msec_name: Final[str] = "RATE_LIMIT_DELAY_MSEC"
    max_recipients_per_batch_name: Final[str] = "MAX_RECIPIENTS_PER_BATCH"

    _1min: Final[int] = 60
    _1hour: Final[int] = 60 * 60

    def __init__(
        self,
        *,
        api_url: str | None = None,
        rpc_url: str | None = None,
        timeout_sec: int | None = None,
        max_bundles_per_sec: int | None = None,
        rate_limit_delay_msec: int | None = None,
        max_recipients_per_batch: int | None = None,
        debug: bool | None = None,
        hide_sensitive_info: bool | None = None,
    ) -> None:
        """Explicit arguments take precedence over the environment,
        but go through the same parsing and range checks."""
        self._override_dict: dict[str, str] = dict()

        self._set_override(self.api_url_name, api_url)
        self._set_override(self.rpc_url_name, rpc_url)
        self._set_override(self.timeout_sec_name, timeout_sec)
        self._set_override(self.max_bundles_per_sec_name, max_bundles_per_sec)
        self._set_override(self.rate_limit_delay_msec_name, rate_limit_delay_msec)
        self._set_override(self.max_recipients_per_batch_name, max_recipients_per_batch)
        self._set_override(self.debug_name, debug)
        self._set_override(self.hide_sensitive_info_name, hide_sensitive_info)

    def _set_override(self, name: str, value: str | int | bool | None) -> None:
        if value is None:
            return
        elif isinstance(value, bool):
            value = "YES" if value else "NO"
        self._override_dict[name] = str(value)

    def _get_env(self, name: str, default_value: str | None = None) -> str | None:
        value = self._override_dict.get(name, None)
        if value is None:
            value = os.environ.get(name, default_value)
        return value

    def _env_bool(self, name: str, default_value: bool) -> bool:
        true_value_list = ("TRUE", "YES", "ON", "1")
        false_value_list = ("FALSE", "NO", "OFF", "0")
        os_def_value = true_value_list[0] if default_value else false_value_list[0]

        value = self._get_env(name, os_def_value).upper().strip()  # fmt: skip
        if (value not in true_value_list) and (value not in false_value_list):
            _LOG.warning(
                "%s can be: %s or %s, force to use the default value %s",
                name,
                true_value_list,
                false_value_list,
                os_def_value,
            )
            value = os_def_value
        return value in true_value_list

    def _env_num(
        self,
        name: str,
        default_value: int | float | Decimal,
        min_value: int | float | Decimal | None = None,
        max_value: int | float | Decimal | None = None,
    ) -> int | float | Decimal:
        value = self._get_env(name)
        if value is None:
            return default_value

        try:
            if isinstance(default_value, int):
                value = int(value, base=10)
            elif isinstance(default_value, float):
                value = float(value)
            else:
                value = Decimal(value)

            if min_value is not None:
                assert type(min_value) is type(default_value), f"{type(min_value)} is {type(default_value)}"
                if value < min_value:
                    _LOG.warning("%s cannot be less than min value %s", name, min_value)
                    value = min_value

            if max_value is not None:
                assert type(max_value) is type(default_value)
                if value > max_value:
                    _LOG.warning("%s cannot be bigger than max value %s", name, max_value)
                    value = max_value
            return value

        except ValueError:
            _LOG.warning("bad value for %s, force to use the default value %s", name, default_value)
            return default_value

    @staticmethod
    def _strip_url(url: str) -> str:
        return url.strip().rstrip("/")

    ###################
    # Base settings

    @cached_property
    def hide_sensitive_info(self) -> bool:
        return self._env_bool(self.hide_sensitive_info_name, True)

    @cached_property
    def sensitive_info_list(self) -> tuple[str, ...]:
        # RPC providers usually embed the access key into the URL
        res_list = [self.rpc_url, self.api_url]
        res_set = set([item for item in res_list if item])
        res_list = sorted(res_set, key=lambda x: len(x), reverse=True)
        return tuple(res_list)

    @cached_property
    def debug(self) -> bool:
        return self._env_bool(self.debug_name, False)

    #########################
    # Remote API configuration

    @cached_property
    def api_url(self) -> str:
        api_url = self._strip_url(self._get_env(self.api_url_name, ""))
        if not api_url:
            _LOG.debug("%s is not defined, force to use the default value %s", self.api_url_name, DEFAULT_API_URL)
            api_url = DEFAULT_API_URL
        return api_url

    @cached_property
    def timeout_sec(self) -> float:
        return float(self._env_num(self.timeout_sec_name, self._1min, 1, self._1hour))

    #########################
    # Solana RPC configuration

    @cached_property
    def rpc_url(self) -> str:
        rpc_url = self._strip_url(self._get_env(self.rpc_url_name, ""))
        if not rpc_url:
            _LOG.debug("%s is not defined, force to use the default value %s", self.rpc_url_name, DEFAULT_RPC_URL)
            rpc_url = DEFAULT_RPC_URL
        return rpc_url

    #########################
    # Submission settings

    @cached_property
    def max_bundles_per_sec(self) -> int:
        return self._env_num(self.max_bundles_per_sec_name, DEFAULT_MAX_BUNDLES_PER_SEC, 1, 100)

    @cached_property
    def rate_limit_delay_msec(self) -> int:
        return self._env_num(self.rate_limit_delay_msec_name, DEFAULT_RATE_LIMIT_DELAY_MSEC, 0, self._1min * 1000)

    @property
    def rate_limit_delay_sec(self) -> float:
        return self.rate_limit_delay_msec / 1000

    @cached_property
    def max_recipients_per_batch(self) -> int:
        return self._env_num(self.max_recipients_per_batch_name, DEFAULT_MAX_RECIPIENTS_PER_BATCH, 1, 100)
