# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from protocol.types.currency import Currency, NetAddress, Uint64


def storage_key(field_name: str) -> str:
    """Persisted key for a field: lower case, no separators."""
    return field_name.replace("_", "")


class HostModel(BaseModel):
    """Base for host records: accepts field names or storage keys, dumps storage keys with by_alias."""
    model_config = ConfigDict(
        alias_generator=storage_key,
        populate_by_name=True,
    )


class FinancialMetrics(HostModel):
    """
    Financial statistics of the host, including money locked in contracts.

    Potential amounts belong to contracts whose proof window has not yet closed.
    When a contract concludes each potential amount moves into exactly one
    realized field (revenue) or loss field (lost_revenue, lost_storage_collateral).
    """
    # Contract fees paid by renters at formation
    contract_compensation: Currency = Field(default_factory=Currency)
    potential_contract_compensation: Currency = Field(default_factory=Currency)

    # Storage proofs, collateral, and transactions submitted to the chain
    locked_storage_collateral: Currency = Field(default_factory=Currency)
    lost_revenue: Currency = Field(default_factory=Currency)
    lost_storage_collateral: Currency = Field(default_factory=Currency)
    potential_storage_revenue: Currency = Field(
        default_factory=Currency,
        alias="potentialstoragerevenue",
        # Older records used a misspelled key
        validation_alias=AliasChoices("potentialstoragerevenue", "potentialerevenue", "potential_storage_revenue"),
    )
    risked_storage_collateral: Currency = Field(default_factory=Currency)
    storage_revenue: Currency = Field(default_factory=Currency)
    transaction_fee_expenses: Currency = Field(default_factory=Currency)

    # Bandwidth
    download_bandwidth_revenue: Currency = Field(default_factory=Currency)
    potential_download_bandwidth_revenue: Currency = Field(default_factory=Currency)
    potential_upload_bandwidth_revenue: Currency = Field(default_factory=Currency)
    upload_bandwidth_revenue: Currency = Field(default_factory=Currency)


class NetworkMetrics(HostModel):
    """Count of each kind of RPC call made to the host, plus bandwidth consumed. Counters only grow."""
    net_address: NetAddress = NetAddress("")

    download_bandwidth_consumed: Uint64 = 0
    upload_bandwidth_consumed: Uint64 = 0

    download_calls: Uint64 = 0
    error_calls: Uint64 = 0
    form_contract_calls: Uint64 = 0
    renew_calls: Uint64 = 0
    revise_calls: Uint64 = 0
    settings_calls: Uint64 = 0
    unrecognized_calls: Uint64 = 0
