from __future__ import annotations

from typing import Callable, Sequence

from .config import Config

_HIDDEN_VALUE = "*****"


def LogMsgFilter(cfg: Config) -> dict:  # noqa
    """Extra-dict for logging calls: JSONFormatter applies the filter to the message."""
    if cfg.hide_sensitive_info and cfg.sensitive_info_list:
        return dict(msg_filter=_hide_sensitive_info(cfg.sensitive_info_list))
    return dict()


def hide_sensitive_info(msg_filter: dict, value: str | Sequence[str] | dict) -> str | list[str] | dict:
    if "msg_filter" in msg_filter:
        return msg_filter["msg_filter"](value)
    return value


def _hide_sensitive_info(sensitive_info_list: Sequence[str]) -> Callable:
    def _hide_in_str(value: str) -> str:
        for item in sensitive_info_list:
            value = value.replace(item, _HIDDEN_VALUE)
        return value

    def _wrapper(value):
        if isinstance(value, str):
            return _hide_in_str(value)
        elif isinstance(value, list):
            return [_wrapper(item) for item in value]
        elif isinstance(value, dict):
            return {k: _wrapper(v) for k, v in value.items()}
        return value

    return _wrapper
