# MIT License
# Copyright (c) 2025 Hashborn

"""
Prometheus Metrics Exporter

Exports host metrics in Prometheus format.

Metrics:
- RPC calls by kind, bandwidth consumed
- Financial metrics (in whole coins)
- Whether the host accepts new contracts
"""

import logging

from prometheus_client import CollectorRegistry, Counter, Gauge

from protocol.config.params import COIN_PRECISION

logger = logging.getLogger(__name__)

# Create registry for metrics
metrics_registry = CollectorRegistry()

# ═══════════════════════════════════════════════════════════════════
# NETWORK METRICS
# ═══════════════════════════════════════════════════════════════════

rpc_calls_total = Counter(
    'storagehost_rpc_calls_total',
    'Total RPC calls made to the host',
    ['call'],
    registry=metrics_registry
)

bandwidth_bytes_total = Counter(
    'storagehost_bandwidth_bytes_total',
    'Total bandwidth consumed by host connections',
    ['direction'],
    registry=metrics_registry
)

# ═══════════════════════════════════════════════════════════════════
# ECONOMIC METRICS
# ═══════════════════════════════════════════════════════════════════

financial_coins = Gauge(
    'storagehost_financial_coins',
    'Host financial metric in whole coins',
    ['metric'],
    registry=metrics_registry
)

accepting_contracts = Gauge(
    'storagehost_accepting_contracts',
    'Whether the host accepts new contracts (1 = yes)',
    registry=metrics_registry
)

collateral_budget_remaining = Gauge(
    'storagehost_collateral_budget_remaining_coins',
    'Collateral the host may still lock in new contracts',
    registry=metrics_registry
)


# ═══════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════

def to_coins(hastings) -> float:
    """Approximate coin value for display; never used for accounting."""
    return int(hastings) / COIN_PRECISION


def update_metrics(host):
    """
    Refresh gauges from host snapshots. Called when metrics are scraped.

    Args:
        host: HostService instance
    """
    financial = host.financial_metrics()
    for name in type(financial).model_fields:
        financial_coins.labels(metric=name).set(to_coins(getattr(financial, name)))

    settings = host.internal_settings()
    accepting_contracts.set(1 if settings.accepting_contracts else 0)
    collateral_budget_remaining.set(to_coins(host.collateral_budget_remaining()))
    logger.debug("Host metrics refreshed")
