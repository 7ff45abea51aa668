# MIT License
# Copyright (c) 2025 Hashborn

"""
Ledger Invariant Tests

Every potential amount ends up in exactly one realized or lost field once the
obligation concludes, and nothing is counted twice.
"""

import pytest

from host.core.ledger import (
    StorageObligation,
    add_obligation,
    collateral_budget_remaining,
    fail_obligation,
    succeed_obligation,
)
from host.core.metrics import FinancialMetrics
from host.core.settings import InternalSettings
from protocol.types.common import NegativeCurrencyError
from protocol.types.currency import Currency

POTENTIAL_FIELDS = (
    "potential_contract_compensation",
    "potential_storage_revenue",
    "potential_download_bandwidth_revenue",
    "potential_upload_bandwidth_revenue",
)


@pytest.fixture
def ob():
    return StorageObligation(
        obligation_id="fc-1",
        contract_cost=Currency(10),
        storage_revenue=Currency(100),
        download_revenue=Currency(20),
        upload_revenue=Currency(5),
        locked_collateral=Currency(300),
        risked_collateral=Currency(150),
        transaction_fees=Currency(2),
    )


def test_add_obligation_records_potentials(ob):
    m = add_obligation(FinancialMetrics(), ob)
    assert m.potential_contract_compensation == 10
    assert m.potential_storage_revenue == 100
    assert m.potential_download_bandwidth_revenue == 20
    assert m.potential_upload_bandwidth_revenue == 5
    assert m.locked_storage_collateral == 300
    assert m.risked_storage_collateral == 150
    assert m.transaction_fee_expenses == 2
    assert m.storage_revenue == 0


def test_transitions_do_not_modify_input(ob):
    start = FinancialMetrics()
    add_obligation(start, ob)
    assert start == FinancialMetrics()


def test_success_realizes_everything(ob):
    m = succeed_obligation(add_obligation(FinancialMetrics(), ob), ob)

    for name in POTENTIAL_FIELDS:
        assert getattr(m, name) == 0, name
    assert m.contract_compensation == 10
    assert m.storage_revenue == 100
    assert m.download_bandwidth_revenue == 20
    assert m.upload_bandwidth_revenue == 5
    assert m.locked_storage_collateral == 0
    assert m.risked_storage_collateral == 0
    assert m.lost_revenue == 0
    assert m.lost_storage_collateral == 0
    assert m.transaction_fee_expenses == 2


def test_failure_moves_revenue_to_losses(ob):
    m = fail_obligation(add_obligation(FinancialMetrics(), ob), ob)

    for name in POTENTIAL_FIELDS:
        assert getattr(m, name) == 0, name
    assert m.contract_compensation == 10
    assert m.storage_revenue == 0
    assert m.download_bandwidth_revenue == 0
    assert m.upload_bandwidth_revenue == 0
    assert m.lost_revenue == 125
    assert m.lost_storage_collateral == 150
    assert m.locked_storage_collateral == 0
    assert m.risked_storage_collateral == 0


def test_potential_equals_realized_plus_lost(ob):
    """Across several obligations, potential revenue is fully accounted for."""
    other = ob.model_copy(update={"obligation_id": "fc-2", "storage_revenue": Currency(40)})
    m = add_obligation(add_obligation(FinancialMetrics(), ob), other)
    total_potential = (
        m.potential_storage_revenue + m.potential_download_bandwidth_revenue + m.potential_upload_bandwidth_revenue
    )

    m = fail_obligation(succeed_obligation(m, ob), other)
    realized = m.storage_revenue + m.download_bandwidth_revenue + m.upload_bandwidth_revenue
    assert realized + m.lost_revenue == total_potential


def test_concluding_unknown_obligation_fails(ob):
    with pytest.raises(NegativeCurrencyError):
        succeed_obligation(FinancialMetrics(), ob)


def test_collateral_budget_remaining(ob):
    settings = InternalSettings(collateral_budget=Currency(1000))
    m = add_obligation(FinancialMetrics(), ob)
    assert collateral_budget_remaining(m, settings) == 700

    m = add_obligation(add_obligation(m, ob), ob)
    assert collateral_budget_remaining(m, settings) == 100

    # 1200 locked against a 1000 budget
    m = add_obligation(m, ob)
    assert collateral_budget_remaining(m, settings) == 0


def test_collateral_budget_exactly_spent(ob):
    settings = InternalSettings(collateral_budget=Currency(300))
    m = add_obligation(FinancialMetrics(), ob)
    assert collateral_budget_remaining(m, settings) == 0

