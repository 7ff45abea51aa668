# MIT License
# Copyright (c) 2025 Hashborn

"""
Host internal settings: the policy surface an operator can change.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import Field

from protocol.config import params
from protocol.config.params import (
    COLLATERAL_FRACTION_PRECISION,
    MAX_BATCH_SIZE_LIMIT,
    MIN_WINDOW_SIZE,
    HostNetworkConfig,
)
from protocol.types.common import ValidationError
from protocol.types.currency import BlockHeight, Currency, NetAddress, Uint64
from protocol.units import (
    bandwidth_price_to_consensus,
    coins_to_hastings,
    storage_price_to_consensus,
)
from .metrics import HostModel

logger = logging.getLogger(__name__)


class InternalSettings(HostModel):
    # Acceptance
    accepting_contracts: bool = False
    max_duration: BlockHeight = 0
    max_download_batch_size: Uint64 = 0
    max_revise_batch_size: Uint64 = 0
    net_address: NetAddress = NetAddress("")
    window_size: BlockHeight = 0

    # Collateral policy
    collateral: Currency = Field(default_factory=Currency)
    collateral_budget: Currency = Field(default_factory=Currency)   # Bounds total locked collateral
    max_collateral_fraction: Currency = Field(default_factory=Currency)  # Parts per COLLATERAL_FRACTION_PRECISION
    max_collateral: Currency = Field(default_factory=Currency)

    # Bandwidth limiter
    download_limit_growth: Uint64 = 0   # Bytes per second added to the download budget
    download_limit_cap: Uint64 = 0      # Maximum size of the download budget
    download_speed_limit: Uint64 = 0    # Maximum download speed across all connections
    upload_limit_growth: Uint64 = 0     # Bytes per second added to the upload budget
    upload_limit_cap: Uint64 = 0        # Maximum size of the upload budget
    upload_speed_limit: Uint64 = 0      # Maximum upload speed across all connections

    # Price floors
    minimum_contract_price: Currency = Field(default_factory=Currency, alias="contractprice")
    minimum_download_bandwidth_price: Currency = Field(default_factory=Currency)
    minimum_storage_price: Currency = Field(default_factory=Currency, alias="storageprice")
    minimum_upload_bandwidth_price: Currency = Field(default_factory=Currency)


def default_internal_settings(config: Optional[HostNetworkConfig] = None) -> InternalSettings:
    """Settings a freshly initialized host starts with, derived from the network config."""
    config = config or params.CURRENT_NETWORK
    return InternalSettings(
        accepting_contracts=False,
        max_duration=config.max_duration,
        max_download_batch_size=config.max_download_batch_size,
        max_revise_batch_size=config.max_revise_batch_size,
        window_size=config.window_size,
        collateral=storage_price_to_consensus(config.collateral_sc_month_tb),
        collateral_budget=coins_to_hastings(config.collateral_budget_sc),
        max_collateral_fraction=Currency(config.max_collateral_fraction),
        max_collateral=coins_to_hastings(config.max_collateral_sc),
        minimum_contract_price=coins_to_hastings(config.contract_price_sc),
        minimum_download_bandwidth_price=bandwidth_price_to_consensus(config.download_price_sc_tb),
        minimum_storage_price=storage_price_to_consensus(config.storage_price_sc_month_tb),
        minimum_upload_bandwidth_price=bandwidth_price_to_consensus(config.upload_price_sc_tb),
    )


def settings_errors(settings: InternalSettings) -> List[str]:
    """Returns every policy violation in settings (empty if valid)."""
    errors = []

    if settings.window_size < MIN_WINDOW_SIZE:
        errors.append(f"window_size {settings.window_size} below minimum {MIN_WINDOW_SIZE}")
    if settings.max_duration < settings.window_size:
        errors.append(f"max_duration {settings.max_duration} shorter than window_size {settings.window_size}")

    for name in ("max_download_batch_size", "max_revise_batch_size"):
        size = getattr(settings, name)
        if size == 0 or size > MAX_BATCH_SIZE_LIMIT:
            errors.append(f"{name} {size} outside 1..{MAX_BATCH_SIZE_LIMIT}")

    if settings.max_collateral_fraction > COLLATERAL_FRACTION_PRECISION:
        errors.append(
            f"max_collateral_fraction {settings.max_collateral_fraction} exceeds {COLLATERAL_FRACTION_PRECISION}"
        )

    for direction in ("download", "upload"):
        growth = getattr(settings, f"{direction}_limit_growth")
        cap = getattr(settings, f"{direction}_limit_cap")
        if growth and cap and cap < growth:
            errors.append(f"{direction}_limit_cap {cap} smaller than {direction}_limit_growth {growth}")

    if settings.net_address and not settings.net_address.is_valid():
        errors.append(f"net_address {settings.net_address!r} is not a valid host:port address")

    return errors


def validate_internal_settings(settings: InternalSettings) -> None:
    """Raises ValidationError if settings violate host policy."""
    errors = settings_errors(settings)
    if errors:
        logger.warning(f"Rejected internal settings: {'; '.join(errors)}")
        raise ValidationError("; ".join(errors))


def merge_settings(current: InternalSettings, update: Dict[str, Any]) -> InternalSettings:
    """
    Applies a partial update (field names or storage keys) on top of current settings.

    Raises:
        ValidationError: unknown keys or values of the wrong shape
    """
    merged = current.model_dump(by_alias=True)
    known = {name: field.alias or name for name, field in InternalSettings.model_fields.items()}
    aliases = set(known.values())

    for key, value in update.items():
        if key in aliases:
            merged[key] = value
        elif key in known:
            merged[known[key]] = value
        else:
            raise ValidationError(f"Unknown setting: {key}")

    try:
        return InternalSettings.model_validate(merged)
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        raise ValidationError(f"Invalid setting value: {e}") from e
