"""
Multi-tier Cluster Performance & Cost Estimator
===============================================

Estimates what a hot/warm/cold/frozen/deep-freeze data cluster can ingest,
how fast it answers queries, and what it costs per month, from the hardware
entered for each tier.

The estimate has two stages:

1. **Tier capacity model** - per-tier ingest throughput, query latency and
   ingest latency from core count, memory, disk class and IOPS.
2. **Aggregation** - cluster-wide totals, node-weighted latencies, storage
   efficiency and compression, compute + storage + infrastructure cost,
   expected load versus capacity, and PB-scale recommendations.

The ``serverless`` deployment type skips both stages and is priced per GB
(see :mod:`pricing`).

Everything here is a pure function of a :class:`ClusterConfig`.  Malformed
or missing numbers are treated as 0 rather than raising; a disabled tier
contributes nothing.

Tier Parameters
---------------
- **node_count** - data nodes in the tier.
- **cpu_cores** - cores per node.  Ingest scales linearly; query latency
  scales as ``max(8 / cores, 0.5)``.
- **memory_gb** - RAM per node.  Ingest scales as ``min(mem / 64, 1.0)``;
  query latency as ``max(32 / mem, 0.7)``.
- **storage_type** - ``nvme`` / ``ssd`` / ``hdd``.  HDD cuts ingest to 30 %
  and multiplies query latency by 2.5.
- **iops** - ingest latency scales as ``max(10000 / iops, 0.5)``.
- **storage_size_gb** - disk per node; drives storage totals and cost.

Cluster Parameters
------------------
- **ops_per_core** - operations per core per second.
  Min: 2 000, Max: 2 500, Default: 2 000.
- **ingest_volume** - optional expected ingest (e.g. 0.5 PB/day of traces).
- **infrastructure_nodes** - master / coordinating / ML / UI nodes, billed
  at the per-node compute rate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from cluster_types import (
    DEFAULT_OPS_PER_CORE,
    MAX_OPS_PER_CORE,
    MIN_OPS_PER_CORE,
    TIER_ORDER,
    ClusterConfig,
    DeploymentType,
    PerformanceMetrics,
    StorageType,
    TierConfig,
    TierMetrics,
    TierType,
    TimeUnit,
    VolumeUnit,
    round_half_up,
    to_number,
)
from ingest_volume import (
    daily_ingest_pb,
    format_docs_per_second,
    format_volume,
    to_docs_per_second,
    volume_to_monthly_gb,
)
from pb_scale import (
    CLUSTER_SPLIT_MIN_PB_PER_DAY,
    PB_SCALE_REFERENCE,
    RECOMMENDATION_MIN_PB_PER_DAY,
    compare_to_pb_scale,
    storage_requirement_pb,
)
from pricing import (
    GB_PER_TB,
    SERVERLESS_RETENTION_RATIO,
    compute_price_per_node,
    is_frozen_category,
    serverless_cost,
    storage_cost,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Coefficient tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TierMultipliers:
    """Throughput/latency trade-off of a tier relative to hot."""
    ingest: float
    query: float


TIER_MULTIPLIERS: dict[TierType, TierMultipliers] = {
    TierType.HOT: TierMultipliers(ingest=1.0, query=1.0),
    TierType.WARM: TierMultipliers(ingest=0.8, query=0.7),
    TierType.COLD: TierMultipliers(ingest=0.3, query=0.4),
    TierType.FROZEN: TierMultipliers(ingest=0.1, query=0.2),
    TierType.DEEP_FREEZE: TierMultipliers(ingest=0.05, query=0.1),
}


@dataclass(frozen=True)
class StorageMultipliers:
    """Effect of a disk class, relative to SSD."""
    ingest: float
    query_latency: float
    ingest_latency: float
    efficiency: float


STORAGE_MULTIPLIERS: dict[StorageType, StorageMultipliers] = {
    StorageType.NVME: StorageMultipliers(
        ingest=1.2, query_latency=0.8, ingest_latency=0.7, efficiency=1.0,
    ),
    StorageType.SSD: StorageMultipliers(
        ingest=1.0, query_latency=1.0, ingest_latency=1.0, efficiency=0.9,
    ),
    StorageType.HDD: StorageMultipliers(
        ingest=0.3, query_latency=2.5, ingest_latency=3.0, efficiency=0.6,
    ),
}

# Baseline latencies of a hot SSD node (ms).
BASE_QUERY_LATENCY_MS = 50.0
BASE_INGEST_LATENCY_MS = 10.0

# Ingest scales with memory up to this size per node (GB).
MEMORY_BASELINE_GB = 64

# Reference resources for latency scaling and their floors.
QUERY_CPU_REFERENCE_CORES = 8
QUERY_CPU_FACTOR_FLOOR = 0.5
QUERY_MEMORY_REFERENCE_GB = 32
QUERY_MEMORY_FACTOR_FLOOR = 0.7
INGEST_IOPS_REFERENCE = 10_000
INGEST_IOPS_FACTOR_FLOOR = 0.5

# Tiers whose data is stored compressed, and the size kept (53 % reduction).
COMPRESSED_TIERS = frozenset({TierType.COLD, TierType.FROZEN, TierType.DEEP_FREEZE})
COMPRESSED_SIZE_FACTOR = 0.47

# Days of ingest kept in frozen blob storage.
FROZEN_BLOB_RETENTION_DAYS = 30

GB_PER_PB = 1024 * 1024


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

_TIER_DEFAULTS: dict[TierType, dict[str, object]] = {
    TierType.HOT: dict(
        storage_type=StorageType.SSD, storage_size_gb=2000, cpu_cores=8,
        memory_gb=32, iops=10_000, throughput_mbps=1000, node_count=3,
        retention_hours=24,
    ),
    TierType.WARM: dict(
        storage_type=StorageType.SSD, storage_size_gb=5000, cpu_cores=8,
        memory_gb=32, iops=5_000, throughput_mbps=500, node_count=2,
        retention_hours=168,
    ),
    TierType.COLD: dict(
        storage_type=StorageType.HDD, storage_size_gb=10_000, cpu_cores=4,
        memory_gb=16, iops=300, throughput_mbps=200, node_count=2,
        retention_hours=720,
    ),
    TierType.FROZEN: dict(
        storage_type=StorageType.HDD, storage_size_gb=20_000, cpu_cores=2,
        memory_gb=8, iops=150, throughput_mbps=100, node_count=1,
        retention_hours=8760,
    ),
    TierType.DEEP_FREEZE: dict(
        storage_type=StorageType.HDD, storage_size_gb=50_000, cpu_cores=2,
        memory_gb=8, iops=100, throughput_mbps=50, node_count=1,
        retention_hours=8760,
    ),
}


def default_tier_config(tier_type: TierType) -> TierConfig:
    """Default hardware for *tier_type*.  Only the hot tier starts enabled."""
    return TierConfig(
        type=tier_type,
        enabled=tier_type is TierType.HOT,
        **_TIER_DEFAULTS[tier_type],
    )


def default_cluster_config(
    deployment_type: DeploymentType = DeploymentType.ELASTIC_CLOUD,
) -> ClusterConfig:
    return ClusterConfig(
        deployment_type=deployment_type,
        tiers=tuple(default_tier_config(t) for t in TIER_ORDER),
    )


def resolve_ops_per_core(value: float | None) -> float:
    """Return the ops/core setting to use, clamped to 2000-2500."""
    ops = to_number(value)
    if ops <= 0:
        return DEFAULT_OPS_PER_CORE
    return min(max(ops, MIN_OPS_PER_CORE), MAX_OPS_PER_CORE)


# ---------------------------------------------------------------------------
# Tier capacity model
# ---------------------------------------------------------------------------

def _scale_factor(reference: float, actual: float, floor: float) -> float:
    """``max(reference / actual, floor)``; an unset *actual* counts as the
    reference value."""
    if actual <= 0:
        return max(1.0, floor)
    return max(reference / actual, floor)


def tier_ingest_capacity(tier: TierConfig, ops_per_core: float) -> float:
    """Ingest throughput of a tier, in operations per second.

    Formula::

        ops/core x cores x nodes x tier.ingest x storage.ingest
            x min(memory / 64, 1.0)

    A disabled tier has no capacity.
    """
    if not tier.enabled:
        return 0.0

    tier_mult = TIER_MULTIPLIERS[tier.type]
    storage_mult = STORAGE_MULTIPLIERS[tier.storage_type]
    memory_mult = min(to_number(tier.memory_gb) / MEMORY_BASELINE_GB, 1.0)

    return (
        to_number(ops_per_core)
        * to_number(tier.cpu_cores)
        * to_number(tier.node_count)
        * tier_mult.ingest
        * storage_mult.ingest
        * memory_mult
    )


def tier_query_latency(tier: TierConfig) -> float:
    """Average query latency of a tier in ms (``inf`` when disabled).

    Formula::

        50 ms x tier.query x storage.query_latency
            x max(8 / cores, 0.5) x max(32 / memory, 0.7)
    """
    if not tier.enabled:
        return float("inf")

    tier_mult = TIER_MULTIPLIERS[tier.type]
    storage_mult = STORAGE_MULTIPLIERS[tier.storage_type]
    cpu_factor = _scale_factor(
        QUERY_CPU_REFERENCE_CORES, to_number(tier.cpu_cores), QUERY_CPU_FACTOR_FLOOR,
    )
    memory_factor = _scale_factor(
        QUERY_MEMORY_REFERENCE_GB, to_number(tier.memory_gb), QUERY_MEMORY_FACTOR_FLOOR,
    )

    return (
        BASE_QUERY_LATENCY_MS
        * tier_mult.query
        * storage_mult.query_latency
        * cpu_factor
        * memory_factor
    )


def tier_ingest_latency(tier: TierConfig) -> float:
    """Average per-document ingest latency of a tier in ms (``inf`` when
    disabled).

    Formula::

        10 ms x tier.ingest x storage.ingest_latency x max(10000 / iops, 0.5)
    """
    if not tier.enabled:
        return float("inf")

    tier_mult = TIER_MULTIPLIERS[tier.type]
    storage_mult = STORAGE_MULTIPLIERS[tier.storage_type]
    iops_factor = _scale_factor(
        INGEST_IOPS_REFERENCE, to_number(tier.iops), INGEST_IOPS_FACTOR_FLOOR,
    )

    return (
        BASE_INGEST_LATENCY_MS
        * tier_mult.ingest
        * storage_mult.ingest_latency
        * iops_factor
    )


def tier_storage_gb(tier: TierConfig) -> float:
    """Raw storage of an enabled tier (GB across all nodes)."""
    if not tier.enabled:
        return 0.0
    return to_number(tier.storage_size_gb) * to_number(tier.node_count)


def tier_compressed_storage_gb(tier: TierConfig) -> float:
    """Storage after compression; cold and colder tiers keep 47 %."""
    raw = tier_storage_gb(tier)
    if tier.type in COMPRESSED_TIERS:
        return raw * COMPRESSED_SIZE_FACTOR
    return raw


# ---------------------------------------------------------------------------
# Aggregation helpers
# ---------------------------------------------------------------------------

def _weighted_average(values: list[tuple[float, float]]) -> float:
    """Average of ``(value, weight)`` pairs; 0 when the weights sum to 0."""
    total_weight = sum(w for _, w in values)
    if total_weight <= 0:
        return 0.0
    return sum(v * w for v, w in values) / total_weight


def _storage_efficiency(tiers: list[TierConfig]) -> float:
    total = sum(tier_storage_gb(t) for t in tiers)
    if total <= 0:
        return 0.0
    efficient = sum(
        tier_storage_gb(t) * STORAGE_MULTIPLIERS[t.storage_type].efficiency
        for t in tiers
    )
    return efficient / total * 100


def _blob_storage_cost(config: ClusterConfig, tier: TierConfig) -> float:
    """Object-storage cost behind a frozen-category tier's SSD cache.

    Only estimated when the ingest volume is given in PB/day: 30 days of
    compressed ingest billed at the provider's blob rate.
    """
    volume = config.ingest_volume
    if volume is None or not is_frozen_category(tier.type):
        return 0.0
    if volume.volume_unit is not VolumeUnit.PB or volume.time_unit is not TimeUnit.DAY:
        return 0.0

    blob_pb = storage_requirement_pb(
        to_number(volume.value), FROZEN_BLOB_RETENTION_DAYS,
    )
    return storage_cost(
        blob_pb * GB_PER_PB,
        tier.storage_type,
        tier.type,
        config.deployment_type,
        use_blob_storage=True,
    )


def _node_and_storage(config: ClusterConfig, tier_type: TierType) -> tuple[float, float]:
    tier = config.tier(tier_type)
    if tier is None or not tier.enabled:
        return 0.0, 0.0
    return to_number(tier.node_count), to_number(tier.storage_size_gb) / GB_PER_TB


def _recommendations(config: ClusterConfig, compare_hardware: bool = True) -> list[str]:
    """PB-scale advice for high-volume ingest.

    From 0.3 PB/day, each hot/cold/frozen resource below 80 % of the
    reference layout gets a line, unless *compare_hardware* is false.  From
    0.5 PB/day a 30-day frozen storage estimate and a cluster-split
    suggestion are added.
    """
    if config.ingest_volume is None:
        return []

    daily_pb = daily_ingest_pb(config.ingest_volume)
    if daily_pb < RECOMMENDATION_MIN_PB_PER_DAY:
        return []

    recommendations: list[str] = []
    if compare_hardware:
        hot_nodes, hot_tb = _node_and_storage(config, TierType.HOT)
        cold_nodes, cold_tb = _node_and_storage(config, TierType.COLD)
        frozen_nodes, frozen_tb = _node_and_storage(config, TierType.FROZEN)
        comparison = compare_to_pb_scale(
            hot_nodes, hot_tb, cold_nodes, cold_tb, frozen_nodes, frozen_tb,
        )
        recommendations.extend(comparison.differences)

    if daily_pb >= CLUSTER_SPLIT_MIN_PB_PER_DAY:
        frozen_pb = storage_requirement_pb(daily_pb, FROZEN_BLOB_RETENTION_DAYS)
        reduction = round(PB_SCALE_REFERENCE.storage.compression_ratio * 100)
        recommendations.append(
            f"Estimated 30-day frozen storage: {frozen_pb:.2f} PB "
            f"(after {reduction}% compression)"
        )
        recommendations.append(
            f"At {daily_pb:.2f} PB/day, consider splitting ingest across "
            f"multiple clusters"
        )

    return recommendations


def _build_summary(config: ClusterConfig, metrics: PerformanceMetrics) -> str:
    lines = [
        "=== Cluster Performance & Cost Estimate ===",
        "",
        f"Deployment: {config.deployment_type.value}",
        f"Data nodes: {config.total_nodes}"
        f"  |  ops/core: {metrics.ops_per_core:g}",
    ]
    if config.ingest_volume is not None:
        lines.append(
            f"Ingest volume: {format_volume(config.ingest_volume)}"
            f" ({config.ingest_volume.data_type.value})"
        )
    lines.append("")

    if metrics.serverless_cost is not None:
        cost = metrics.serverless_cost
        lines += [
            "--- Serverless cost (monthly) ---",
            f"  Ingest         = ${cost.ingest_cost:,.2f}",
            f"  Retention      = ${cost.retention_cost:,.2f}",
            f"  Egress         = ${cost.egress_cost:,.2f}",
            f"  Total          = ${cost.total_cost:,.2f}",
        ]
    else:
        lines += [
            "--- Performance ---",
            f"  Max ingest     = {format_docs_per_second(metrics.max_ingest_rate)}",
            f"  Query latency  = {metrics.avg_query_latency:.1f} ms",
            f"  Ingest latency = {metrics.avg_ingest_latency:.1f} ms",
            f"  Storage eff.   = {metrics.storage_efficiency:.1f}%",
            "",
            "--- Storage ---",
            f"  Total          = {metrics.total_storage_gb:,.0f} GB",
            f"  Compressed     = {metrics.compressed_storage_gb:,.0f} GB",
            "",
            "--- Cost (monthly) ---",
            f"  Compute        = ${metrics.compute_cost:,.0f}"
            f"  (infrastructure ${metrics.infrastructure_cost:,.0f})",
            f"  Storage        = ${metrics.storage_cost:,.0f}",
            f"  Total          = ${metrics.cost_estimate:,.0f}",
        ]

    if metrics.expected_ingest_rate is not None:
        lines += [
            "",
            f"Expected ingest: {format_docs_per_second(metrics.expected_ingest_rate)}",
        ]
        if metrics.capacity_utilization is not None:
            lines.append(f"Utilization: {metrics.capacity_utilization:.1f}%")

    if metrics.recommendations:
        lines += ["", "--- Recommendations ---"]
        lines += [f"  - {r}" for r in metrics.recommendations]

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Core algorithm
# ---------------------------------------------------------------------------

def _serverless_metrics(
    config: ClusterConfig,
    ops_per_core: float,
    expected_rate: float | None,
) -> PerformanceMetrics:
    """Serverless pricing: per-GB cost only, no hardware model."""
    volume = config.ingest_volume
    monthly_gb = (
        volume_to_monthly_gb(volume.value, volume.volume_unit, volume.time_unit)
        if volume is not None
        else 0.0
    )
    cost = serverless_cost(
        ingest_gb=monthly_gb,
        retention_gb=monthly_gb * SERVERLESS_RETENTION_RATIO,
        egress_gb=config.serverless_egress_gb,
        tier=config.serverless_tier,
    )
    metrics = PerformanceMetrics(
        max_ingest_rate=0,
        avg_query_latency=0,
        avg_ingest_latency=0,
        storage_efficiency=0,
        cost_estimate=cost.total_cost,
        compute_cost=0,
        storage_cost=0,
        infrastructure_cost=0,
        total_storage_gb=0,
        compressed_storage_gb=0,
        ops_per_core=ops_per_core,
        expected_ingest_rate=(
            round_half_up(expected_rate) if expected_rate is not None else None
        ),
        recommendations=tuple(_recommendations(config, compare_hardware=False)),
        serverless_cost=cost,
    )
    return _with_summary(config, metrics)


def _with_summary(config: ClusterConfig, metrics: PerformanceMetrics) -> PerformanceMetrics:
    return replace(metrics, summary=_build_summary(config, metrics))


def compute_metrics(config: ClusterConfig) -> PerformanceMetrics:
    """Estimate performance and monthly cost of *config*.

    Steps
    -----
    1. Keep enabled tiers only.
    2. Sum per-tier ingest capacity.
    3. Node-weighted average of per-tier query and ingest latency.
    4. Storage efficiency weighted by disk class.
    5. Compressed storage (cold, frozen, deep freeze keep 47 %).
    6. Compute cost: per-node price x data nodes + infrastructure nodes.
    7. Storage cost per tier, plus blob storage for frozen tiers.
    8. Expected ingest rate and capacity utilization.
    9. PB-scale recommendations.
    10. Round: rates, GB and costs to integers; latencies and percentages
        to one decimal.

    Parameters
    ----------
    config : ClusterConfig
        Deployment, tiers and optional ingest volume.

    Returns
    -------
    PerformanceMetrics
        The estimate.  An empty or all-disabled tier set yields zeros.
    """
    ops_per_core = resolve_ops_per_core(config.ops_per_core)
    expected_rate = (
        to_docs_per_second(config.ingest_volume)
        if config.ingest_volume is not None
        else None
    )

    if config.deployment_type is DeploymentType.SERVERLESS:
        return _serverless_metrics(config, ops_per_core, expected_rate)

    # --- Step 1: enabled tiers ---
    enabled = [t for t in config.tiers if t.enabled]

    # --- Step 2: ingest capacity ---
    capacities = {t.type: tier_ingest_capacity(t, ops_per_core) for t in enabled}
    max_ingest_rate = sum(capacities.values())

    # --- Step 3: node-weighted latencies ---
    query_latencies = {t.type: tier_query_latency(t) for t in enabled}
    ingest_latencies = {t.type: tier_ingest_latency(t) for t in enabled}
    avg_query_latency = _weighted_average(
        [(query_latencies[t.type], to_number(t.node_count)) for t in enabled]
    )
    avg_ingest_latency = _weighted_average(
        [(ingest_latencies[t.type], to_number(t.node_count)) for t in enabled]
    )

    # --- Steps 4-5: storage ---
    storage_efficiency = _storage_efficiency(enabled)
    total_storage = sum(tier_storage_gb(t) for t in enabled)
    compressed_storage = sum(tier_compressed_storage_gb(t) for t in enabled)

    # --- Step 6: compute cost ---
    node_price = compute_price_per_node(config.deployment_type)
    tier_compute_cost = sum(node_price * to_number(t.node_count) for t in enabled)
    infra_nodes = (
        config.infrastructure_nodes.total
        if config.infrastructure_nodes is not None
        else 0.0
    )
    infrastructure_cost = node_price * infra_nodes

    # --- Step 7: storage cost ---
    disk_cost = sum(
        storage_cost(
            tier_storage_gb(t), t.storage_type, t.type, config.deployment_type,
        )
        for t in enabled
    )
    blob_cost = sum(_blob_storage_cost(config, t) for t in enabled)
    total_storage_cost = disk_cost + blob_cost

    # --- Step 8: expected load ---
    utilization = None
    if expected_rate is not None and max_ingest_rate > 0:
        utilization = round_half_up(expected_rate / max_ingest_rate * 100, 1)

    # --- Step 9: recommendations ---
    recommendations = _recommendations(config)

    # --- Step 10: assemble ---
    breakdown = tuple(
        TierMetrics(
            tier=t.type,
            ingest_capacity=round_half_up(capacities[t.type]),
            query_latency=round_half_up(query_latencies[t.type], 1),
            ingest_latency=round_half_up(ingest_latencies[t.type], 1),
            storage_used_gb=tier_storage_gb(t),
            compressed_storage_gb=tier_compressed_storage_gb(t),
        )
        for t in enabled
    )

    metrics = PerformanceMetrics(
        max_ingest_rate=round_half_up(max_ingest_rate),
        avg_query_latency=round_half_up(avg_query_latency, 1),
        avg_ingest_latency=round_half_up(avg_ingest_latency, 1),
        storage_efficiency=round_half_up(storage_efficiency, 1),
        cost_estimate=round_half_up(
            tier_compute_cost + infrastructure_cost + total_storage_cost
        ),
        compute_cost=round_half_up(tier_compute_cost + infrastructure_cost),
        storage_cost=round_half_up(total_storage_cost),
        infrastructure_cost=round_half_up(infrastructure_cost),
        total_storage_gb=round_half_up(total_storage),
        compressed_storage_gb=round_half_up(compressed_storage),
        ops_per_core=ops_per_core,
        expected_ingest_rate=(
            round_half_up(expected_rate) if expected_rate is not None else None
        ),
        capacity_utilization=utilization,
        recommendations=tuple(recommendations),
        tier_breakdown=breakdown,
    )

    logger.debug(
        "Estimated %s cluster: %d enabled tiers, %.0f ops/s, $%.0f/month",
        config.deployment_type.value,
        len(enabled),
        metrics.max_ingest_rate,
        metrics.cost_estimate,
    )
    return _with_summary(config, metrics)
