from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar

from common.config.constants import MAX_TX_PER_BUNDLE

_T = TypeVar("_T")


@dataclass(frozen=True)
class Bundle:
    """Ordered group of signed base58 transactions, sent in one broadcast call."""

    tx_list: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tx_list", tuple(self.tx_list))
        if not self.tx_list:
            raise ValueError("Bundle cannot be empty")

    def __len__(self) -> int:
        return len(self.tx_list)


def split_list(item_list: Sequence[_T], size: int) -> tuple[tuple[_T, ...], ...]:
    if size < 1:
        raise ValueError(f"Wrong chunk size: {size}")
    return tuple(tuple(item_list[idx : idx + size]) for idx in range(0, len(item_list), size))


def assemble_bundle_list(tx_list: Sequence[str], capacity: int = MAX_TX_PER_BUNDLE) -> tuple[Bundle, ...]:
    return tuple(Bundle(chunk) for chunk in split_list(tx_list, capacity))
