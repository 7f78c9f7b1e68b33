"""Runtime settings read from ``POS_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_SHIPPING_FEE = 30.0


@dataclass(frozen=True)
class Settings:
    shipping_fee: float = DEFAULT_SHIPPING_FEE
    log_dir: str = "logs"
    log_level: int = logging.INFO
    customer_name: str = "Customer"
    customer_balance: float = 1000.0


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number (got {raw!r})")
    if value < 0:
        raise ValueError(f"{name} must not be negative (got {raw!r})")
    return value


def _level_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"{name} is not a logging level (got {raw!r})")
    return level


def load_settings() -> Settings:
    """Build :class:`Settings` from the environment, falling back to defaults.

    Raises:
        ValueError: If a variable is set to an unusable value.
    """
    return Settings(
        shipping_fee=_float_env("POS_SHIPPING_FEE", DEFAULT_SHIPPING_FEE),
        log_dir=os.environ.get("POS_LOG_DIR", "logs"),
        log_level=_level_env("POS_LOG_LEVEL", logging.INFO),
        customer_name=os.environ.get("POS_CUSTOMER_NAME", "Customer"),
        customer_balance=_float_env("POS_CUSTOMER_BALANCE", 1000.0),
    )
