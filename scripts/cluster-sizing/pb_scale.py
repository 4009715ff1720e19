"""
Reference hardware layout for petabyte-scale ingest (~0.5 PB/day).

Configurations sized for such volumes are compared against this template;
any node count or per-node storage below 80 % of the reference is reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TierReference:
    nodes: int
    ram_gb: int
    vcpu: int
    storage_tb: float
    retention_hours: float | None = None


@dataclass(frozen=True)
class InfrastructureReference:
    master_nodes: int
    ml_nodes: int
    ui_nodes: int


@dataclass(frozen=True)
class StorageReference:
    compression_ratio: float       # 0.53 = 53 % reduction
    frozen_30_day_pb: float
    deep_freeze_yearly_pb: float


@dataclass(frozen=True)
class PBScaleReference:
    hot: TierReference
    cold: TierReference
    frozen: TierReference
    infrastructure: InfrastructureReference
    storage: StorageReference


PB_SCALE_REFERENCE = PBScaleReference(
    hot=TierReference(nodes=160, ram_gb=64, vcpu=32, storage_tb=4, retention_hours=0),
    cold=TierReference(nodes=60, ram_gb=64, vcpu=32, storage_tb=10, retention_hours=24),
    frozen=TierReference(nodes=66, ram_gb=64, vcpu=32, storage_tb=10),
    infrastructure=InfrastructureReference(master_nodes=3, ml_nodes=1, ui_nodes=2),
    storage=StorageReference(
        compression_ratio=0.53,
        frozen_30_day_pb=15,
        deep_freeze_yearly_pb=100,
    ),
)

# A resource is flagged when it is below this fraction of the reference.
REFERENCE_THRESHOLD = 0.8

# Daily ingest (PB/day) from which the comparison is run.
RECOMMENDATION_MIN_PB_PER_DAY = 0.3

# Daily ingest (PB/day) from which storage and cluster-split advice is added.
CLUSTER_SPLIT_MIN_PB_PER_DAY = 0.5


@dataclass(frozen=True)
class PBScaleComparison:
    matches: bool
    differences: list[str] = field(default_factory=list)


def storage_requirement_pb(
    daily_ingest_pb: float,
    retention_days: float,
    compression_ratio: float = PB_SCALE_REFERENCE.storage.compression_ratio,
) -> float:
    """Storage (PB) needed to keep *retention_days* of compressed ingest."""
    return daily_ingest_pb * retention_days * (1 - compression_ratio)


def _below(actual: float, reference: float) -> bool:
    return actual < reference * REFERENCE_THRESHOLD


def _fmt(value: float) -> str:
    return f"{round(value, 2):g}"


def compare_to_pb_scale(
    hot_nodes: float,
    hot_storage_tb: float,
    cold_nodes: float,
    cold_storage_tb: float,
    frozen_nodes: float,
    frozen_storage_tb: float,
) -> PBScaleComparison:
    """Compare a tier layout against ``PB_SCALE_REFERENCE``.

    Checked resources: hot node count, hot storage per node, cold node
    count, cold storage per node and frozen node count.  Frozen storage per
    node is accepted for symmetry but not checked, since frozen data lives
    in blob storage behind a cache.
    """
    ref = PB_SCALE_REFERENCE
    differences: list[str] = []

    if _below(hot_nodes, ref.hot.nodes):
        differences.append(
            f"Hot tier: {_fmt(hot_nodes)} nodes (recommended: {ref.hot.nodes})"
        )
    if _below(hot_storage_tb, ref.hot.storage_tb):
        differences.append(
            f"Hot tier storage: {_fmt(hot_storage_tb)} TB/node "
            f"(recommended: {_fmt(ref.hot.storage_tb)} TB/node)"
        )
    if _below(cold_nodes, ref.cold.nodes):
        differences.append(
            f"Cold tier: {_fmt(cold_nodes)} nodes (recommended: {ref.cold.nodes})"
        )
    if _below(cold_storage_tb, ref.cold.storage_tb):
        differences.append(
            f"Cold tier storage: {_fmt(cold_storage_tb)} TB/node "
            f"(recommended: {_fmt(ref.cold.storage_tb)} TB/node)"
        )
    if _below(frozen_nodes, ref.frozen.nodes):
        differences.append(
            f"Frozen tier: {_fmt(frozen_nodes)} nodes (recommended: {ref.frozen.nodes})"
        )

    return PBScaleComparison(matches=not differences, differences=differences)
