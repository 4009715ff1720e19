"""
Value types shared by the cluster performance/cost estimator.

Every entity here is an immutable value object: callers derive modified
copies with :func:`dataclasses.replace` and the engine never keeps state
between calls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TierType(Enum):
    """Data tier, ordered from fastest/most expensive to slowest/cheapest."""
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"
    FROZEN = "frozen"
    DEEP_FREEZE = "deep_freeze"


TIER_ORDER: tuple[TierType, ...] = (
    TierType.HOT,
    TierType.WARM,
    TierType.COLD,
    TierType.FROZEN,
    TierType.DEEP_FREEZE,
)


class StorageType(Enum):
    SSD = "ssd"
    HDD = "hdd"
    NVME = "nvme"


class DeploymentType(Enum):
    ON_PREM = "on_prem"
    AWS = "aws"
    GCP = "gcp"
    AZURE = "azure"
    ELASTIC_CLOUD = "elastic_cloud"
    SERVERLESS = "serverless"


class VolumeUnit(Enum):
    PB = "PB"
    TB = "TB"
    GB = "GB"
    MB = "MB"


class TimeUnit(Enum):
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"


class DataType(Enum):
    """Kind of ingested data.

    ``TRACES``, ``LOGS`` and ``METRICS`` assume OpenTelemetry (OTLP)
    documents and carry built-in average document sizes; ``CUSTOM`` expects
    the caller to supply one.
    """
    TRACES = "traces"
    LOGS = "logs"
    METRICS = "metrics"
    CUSTOM = "custom"


class ServerlessTier(Enum):
    LOGS_ESSENTIALS = "logs_essentials"
    COMPLETE = "complete"


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------

def to_number(value: object) -> float:
    """Coerce *value* to a finite float, falling back to 0.0.

    ``None``, non-numeric strings, NaN and infinities all become 0.0 so that
    a half-filled form never makes the estimator fail.
    """
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero for positives (``2.5 -> 3``), unlike
    :func:`round` which rounds half to even."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


# ---------------------------------------------------------------------------
# Input configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TierConfig:
    """Hardware and retention settings for one data tier.

    Parameters
    ----------
    type : TierType
        Which tier this entry describes.  Exactly one entry per tier type
        is expected in a :class:`ClusterConfig`.
    enabled : bool
        Disabled tiers contribute nothing to capacity, cost or storage.
    retention_hours : float
        How long data stays in this tier before moving on.
    node_count : int
        Number of data nodes in the tier (>= 1 when enabled).
    storage_type : StorageType
        Disk class of every node in the tier.
    storage_size_gb : float
        Disk capacity per node, in GB.
    cpu_cores : int
        CPU cores per node.
    memory_gb : float
        RAM per node, in GB.
    iops : float
        Disk IOPS per node.
    throughput_mbps : float
        Disk throughput per node, in MB/s.
    sku_id : str, optional
        Catalog id of the hardware template the fields were copied from.
    """
    type: TierType
    enabled: bool = False
    retention_hours: float = 24
    node_count: int = 1
    storage_type: StorageType = StorageType.SSD
    storage_size_gb: float = 0
    cpu_cores: int = 0
    memory_gb: float = 0
    iops: float = 0
    throughput_mbps: float = 0
    sku_id: str | None = None


@dataclass(frozen=True)
class InfrastructureNodes:
    """Dedicated non-data nodes (master, coordinating, ML and UI)."""
    master_nodes: int = 0
    coordinating_nodes: int = 0
    ml_nodes: int = 0
    ui_nodes: int = 0

    @property
    def total(self) -> float:
        return (
            to_number(self.master_nodes)
            + to_number(self.coordinating_nodes)
            + to_number(self.ml_nodes)
            + to_number(self.ui_nodes)
        )


@dataclass(frozen=True)
class IngestVolumeConfig:
    """Expected ingest volume, e.g. ``0.5 PB / day`` of traces.

    ``avg_document_size_kb`` overrides the per-data-type default document
    size; it is expected for ``DataType.CUSTOM``.
    """
    value: float = 0
    volume_unit: VolumeUnit = VolumeUnit.PB
    time_unit: TimeUnit = TimeUnit.DAY
    data_type: DataType = DataType.TRACES
    avg_document_size_kb: float | None = None


DEFAULT_OPS_PER_CORE = 2000
MIN_OPS_PER_CORE = 2000
MAX_OPS_PER_CORE = 2500


@dataclass(frozen=True)
class ClusterConfig:
    """Everything the estimator needs to evaluate a deployment.

    Parameters
    ----------
    deployment_type : DeploymentType
        Where the cluster runs; selects compute/storage price tables.
    tiers : tuple[TierConfig, ...]
        One entry per tier type, in ``TIER_ORDER``.
    ingest_volume : IngestVolumeConfig, optional
        Expected ingest volume.  Enables the expected-rate, utilisation,
        blob-storage and PB-scale outputs.
    infrastructure_nodes : InfrastructureNodes, optional
        Dedicated non-data nodes, billed at the per-node compute rate.
    ops_per_core : float, optional
        Operations per CPU core per second.  Default 2000, range 2000-2500.
    serverless_tier : ServerlessTier
        Pricing tier for the serverless deployment type.
    serverless_egress_gb : float
        Monthly egress for the serverless deployment type.
    """
    deployment_type: DeploymentType = DeploymentType.ELASTIC_CLOUD
    tiers: tuple[TierConfig, ...] = ()
    ingest_volume: IngestVolumeConfig | None = None
    infrastructure_nodes: InfrastructureNodes | None = None
    ops_per_core: float | None = None
    serverless_tier: ServerlessTier = ServerlessTier.COMPLETE
    serverless_egress_gb: float = 0

    @property
    def total_nodes(self) -> int:
        """Data nodes across all enabled tiers."""
        return int(sum(to_number(t.node_count) for t in self.tiers if t.enabled))

    def tier(self, tier_type: TierType) -> TierConfig | None:
        for t in self.tiers:
            if t.type is tier_type:
                return t
        return None


# ---------------------------------------------------------------------------
# Hardware catalog entry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HardwareSKU:
    """A named hardware template that can pre-populate a tier."""
    id: str
    name: str
    storage_type: StorageType
    storage_size_gb: float
    cpu_cores: int
    memory_gb: float
    iops: float
    throughput_mbps: float
    cost_per_month: float
    deployment_types: tuple[DeploymentType, ...]
    description: str = ""


# ---------------------------------------------------------------------------
# Output / result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ServerlessCost:
    """Monthly serverless cost breakdown, in dollars (2 decimals)."""
    ingest_cost: float
    retention_cost: float
    egress_cost: float
    total_cost: float

    def to_dict(self) -> dict[str, float]:
        return {
            "ingest_cost": self.ingest_cost,
            "retention_cost": self.retention_cost,
            "egress_cost": self.egress_cost,
            "total_cost": self.total_cost,
        }


@dataclass(frozen=True)
class TierMetrics:
    """Per-tier slice of the estimate."""
    tier: TierType
    ingest_capacity: float
    query_latency: float
    ingest_latency: float
    storage_used_gb: float
    compressed_storage_gb: float

    def to_dict(self) -> dict[str, object]:
        return {
            "tier": self.tier.value,
            "ingest_capacity": self.ingest_capacity,
            "query_latency": self.query_latency,
            "ingest_latency": self.ingest_latency,
            "storage_used_gb": self.storage_used_gb,
            "compressed_storage_gb": self.compressed_storage_gb,
        }


@dataclass(frozen=True)
class PerformanceMetrics:
    """Complete estimate for a :class:`ClusterConfig`.

    Rates are documents (operations) per second, latencies milliseconds,
    costs dollars per month.  ``expected_ingest_rate`` is ``None`` when no
    ingest volume was given; ``capacity_utilization`` is also ``None`` when
    the cluster has no ingest capacity.
    """
    max_ingest_rate: float
    avg_query_latency: float
    avg_ingest_latency: float
    storage_efficiency: float
    cost_estimate: float
    compute_cost: float
    storage_cost: float
    infrastructure_cost: float
    total_storage_gb: float
    compressed_storage_gb: float
    ops_per_core: float
    expected_ingest_rate: float | None = None
    capacity_utilization: float | None = None
    recommendations: tuple[str, ...] = ()
    tier_breakdown: tuple[TierMetrics, ...] = ()
    serverless_cost: ServerlessCost | None = None
    summary: str = field(default="", repr=False)

    def to_dict(self) -> dict[str, object]:
        """JSON-safe representation; undefined optional values are omitted."""
        out: dict[str, object] = {
            "max_ingest_rate": self.max_ingest_rate,
            "avg_query_latency": self.avg_query_latency,
            "avg_ingest_latency": self.avg_ingest_latency,
            "storage_efficiency": self.storage_efficiency,
            "cost_estimate": self.cost_estimate,
            "compute_cost": self.compute_cost,
            "storage_cost": self.storage_cost,
            "infrastructure_cost": self.infrastructure_cost,
            "total_storage_gb": self.total_storage_gb,
            "compressed_storage_gb": self.compressed_storage_gb,
            "ops_per_core": self.ops_per_core,
            "recommendations": list(self.recommendations),
            "tier_breakdown": [t.to_dict() for t in self.tier_breakdown],
            "summary": self.summary,
        }
        if self.expected_ingest_rate is not None:
            out["expected_ingest_rate"] = self.expected_ingest_rate
        if self.capacity_utilization is not None:
            out["capacity_utilization"] = self.capacity_utilization
        if self.serverless_cost is not None:
            out["serverless_cost"] = self.serverless_cost.to_dict()
        return out
