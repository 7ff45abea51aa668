# MIT License
# Copyright (c) 2025 Hashborn

"""
Storage obligation accounting.

Each transition takes a FinancialMetrics record and returns a new one; the input
is never modified. Subtraction is checked, so a transition that would drive a
potential or locked amount below zero raises NegativeCurrencyError and the
caller keeps its previous record.

Lifecycle of one obligation:
    add_obligation      -> amounts become potential revenue / locked collateral
    succeed_obligation  -> potential revenue becomes realized revenue
    fail_obligation     -> potential revenue becomes lost revenue,
                           risked collateral becomes lost collateral
"""

from pydantic import BaseModel, Field

from protocol.types.currency import Currency
from .metrics import FinancialMetrics
from .settings import InternalSettings


class StorageObligation(BaseModel):
    """Amounts a single file contract contributes to the host's finances."""
    obligation_id: str
    contract_cost: Currency = Field(default_factory=Currency)
    storage_revenue: Currency = Field(default_factory=Currency)
    download_revenue: Currency = Field(default_factory=Currency)
    upload_revenue: Currency = Field(default_factory=Currency)
    locked_collateral: Currency = Field(default_factory=Currency)
    risked_collateral: Currency = Field(default_factory=Currency)
    transaction_fees: Currency = Field(default_factory=Currency)

    def potential_revenue(self) -> Currency:
        """Revenue forfeited if the storage proof fails."""
        return self.storage_revenue + self.download_revenue + self.upload_revenue


def add_obligation(metrics: FinancialMetrics, ob: StorageObligation) -> FinancialMetrics:
    m = metrics.model_copy()
    m.potential_contract_compensation = m.potential_contract_compensation + ob.contract_cost
    m.potential_storage_revenue = m.potential_storage_revenue + ob.storage_revenue
    m.potential_download_bandwidth_revenue = m.potential_download_bandwidth_revenue + ob.download_revenue
    m.potential_upload_bandwidth_revenue = m.potential_upload_bandwidth_revenue + ob.upload_revenue
    m.locked_storage_collateral = m.locked_storage_collateral + ob.locked_collateral
    m.risked_storage_collateral = m.risked_storage_collateral + ob.risked_collateral
    m.transaction_fee_expenses = m.transaction_fee_expenses + ob.transaction_fees
    return m


def _release(metrics: FinancialMetrics, ob: StorageObligation) -> FinancialMetrics:
    """Removes the obligation's potential amounts and collateral locks."""
    m = metrics.model_copy()
    m.potential_contract_compensation = m.potential_contract_compensation - ob.contract_cost
    m.potential_storage_revenue = m.potential_storage_revenue - ob.storage_revenue
    m.potential_download_bandwidth_revenue = m.potential_download_bandwidth_revenue - ob.download_revenue
    m.potential_upload_bandwidth_revenue = m.potential_upload_bandwidth_revenue - ob.upload_revenue
    m.locked_storage_collateral = m.locked_storage_collateral - ob.locked_collateral
    m.risked_storage_collateral = m.risked_storage_collateral - ob.risked_collateral
    return m


def succeed_obligation(metrics: FinancialMetrics, ob: StorageObligation) -> FinancialMetrics:
    m = _release(metrics, ob)
    m.contract_compensation = m.contract_compensation + ob.contract_cost
    m.storage_revenue = m.storage_revenue + ob.storage_revenue
    m.download_bandwidth_revenue = m.download_bandwidth_revenue + ob.download_revenue
    m.upload_bandwidth_revenue = m.upload_bandwidth_revenue + ob.upload_revenue
    return m


def fail_obligation(metrics: FinancialMetrics, ob: StorageObligation) -> FinancialMetrics:
    m = _release(metrics, ob)
    # The renter paid the contract fee at formation, so it is kept
    m.contract_compensation = m.contract_compensation + ob.contract_cost
    m.lost_revenue = m.lost_revenue + ob.potential_revenue()
    m.lost_storage_collateral = m.lost_storage_collateral + ob.risked_collateral
    return m


def collateral_budget_remaining(metrics: FinancialMetrics, settings: InternalSettings) -> Currency:
    """Collateral the host may still lock in new contracts."""
    if metrics.locked_storage_collateral >= settings.collateral_budget:
        return Currency(0)
    return settings.collateral_budget - metrics.locked_storage_collateral
