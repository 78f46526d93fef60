from __future__ import annotations

import math
from typing import Any, Sequence

from common.config.constants import MIN_ADDRESS_LEN, MAX_ADDRESS_LEN
from common.solana.errors import SolDecodeError
from common.solana.signer import SolSigner
from .api import Protocol, Wallet
from .result import ValidationResult


def parse_amount(value: Any) -> float | None:
    """Strict float parsing: the whole string must be a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def is_valid_amount(value: Any) -> bool:
    amount = parse_amount(value)
    return (amount is not None) and (amount > 0)


def is_valid_percentage(value: Any) -> bool:
    percentage = parse_amount(value)
    return (percentage is not None) and (0 < percentage <= 100)


def has_secret(wallet: Wallet | None) -> bool:
    return (wallet is not None) and isinstance(wallet.private_key, str) and bool(wallet.private_key.strip())


def is_valid_secret(secret: str) -> bool:
    try:
        SolSigner.from_base58(secret)
        return True
    except SolDecodeError:
        return False


def is_valid_wallet(wallet: Wallet | None) -> bool:
    return has_secret(wallet) and is_valid_secret(wallet.private_key)


def is_valid_address_len(address: str | None) -> bool:
    return isinstance(address, str) and (MIN_ADDRESS_LEN <= len(address) <= MAX_ADDRESS_LEN)


def short_address(address: str) -> str:
    return address[:6] + "..."


def check_protocol(protocol: Any) -> ValidationResult:
    supported_list = [item.value for item in Protocol]
    if str(protocol) not in supported_list:
        return ValidationResult.fail(f"Unsupported protocol: {protocol}. Supported: {', '.join(supported_list)}")
    return ValidationResult.ok()


def check_trade_wallet_list(wallet_list: Sequence[Wallet]) -> ValidationResult:
    if not wallet_list:
        return ValidationResult.fail("No wallets provided")

    for wallet in wallet_list:
        if not has_secret(wallet):
            return ValidationResult.fail("Invalid wallet private key")
        if not is_valid_secret(wallet.private_key):
            return ValidationResult.fail("Invalid private key format")
    return ValidationResult.ok()
