"""
Price tables for compute, storage and serverless usage.

Compute is billed per data/infrastructure node per month; storage per TB
per month by provider, tier category and disk class.  The serverless
deployment type skips both and is billed per GB ingested, retained and
transferred instead.
"""

from __future__ import annotations

from dataclasses import dataclass

from cluster_types import (
    DeploymentType,
    ServerlessCost,
    ServerlessTier,
    StorageType,
    TierType,
    round_half_up,
    to_number,
)


# ---------------------------------------------------------------------------
# Compute
# ---------------------------------------------------------------------------

# Monthly price per node (32 vCPU / 64 GB class machine).
COMPUTE_PRICING: dict[DeploymentType, float] = {
    DeploymentType.GCP: 1134,           # n2-standard-32
    DeploymentType.AWS: 1200,
    DeploymentType.AZURE: 1150,
    DeploymentType.ELASTIC_CLOUD: 512,
    DeploymentType.ON_PREM: 500,
    DeploymentType.SERVERLESS: 0,       # pay per use
}

DEFAULT_COMPUTE_PRICE_PER_NODE = 1134


def compute_price_per_node(deployment: DeploymentType) -> float:
    return COMPUTE_PRICING.get(deployment, DEFAULT_COMPUTE_PRICE_PER_NODE)


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StoragePricing:
    """Storage rates in $ / TB / month for one provider."""
    hot_ssd: float
    cold_hdd: float
    cold_ssd: float
    frozen_ssd: float      # local SSD cache in front of blob storage
    frozen_blob: float     # object storage (S3 / GCS / Blob)


GCP_STORAGE_PRICING = StoragePricing(
    hot_ssd=170, cold_hdd=40, cold_ssd=170, frozen_ssd=170, frozen_blob=20,
)
AWS_STORAGE_PRICING = StoragePricing(
    hot_ssd=180, cold_hdd=45, cold_ssd=180, frozen_ssd=180, frozen_blob=25,
)
AZURE_STORAGE_PRICING = StoragePricing(
    hot_ssd=175, cold_hdd=42, cold_ssd=175, frozen_ssd=175, frozen_blob=22,
)

STORAGE_PRICING: dict[DeploymentType, StoragePricing] = {
    DeploymentType.GCP: GCP_STORAGE_PRICING,
    DeploymentType.AWS: AWS_STORAGE_PRICING,
    DeploymentType.AZURE: AZURE_STORAGE_PRICING,
}

# On-prem, Elastic Cloud and serverless are priced like GCP.
DEFAULT_STORAGE_PRICING = GCP_STORAGE_PRICING

# Tier -> pricing category.
TIER_STORAGE_CATEGORY: dict[TierType, str] = {
    TierType.HOT: "hot",
    TierType.WARM: "hot",
    TierType.COLD: "cold",
    TierType.FROZEN: "frozen",
    TierType.DEEP_FREEZE: "frozen",
}

# (category, disk class) -> StoragePricing field.
_STORAGE_RATE_FIELD: dict[tuple[str, StorageType], str] = {
    ("hot", StorageType.SSD): "hot_ssd",
    ("hot", StorageType.NVME): "hot_ssd",
    ("hot", StorageType.HDD): "hot_ssd",
    ("cold", StorageType.SSD): "cold_ssd",
    ("cold", StorageType.NVME): "cold_ssd",
    ("cold", StorageType.HDD): "cold_hdd",
    ("frozen", StorageType.SSD): "frozen_ssd",
    ("frozen", StorageType.NVME): "frozen_ssd",
    ("frozen", StorageType.HDD): "frozen_ssd",
}

GB_PER_TB = 1024


def storage_pricing(deployment: DeploymentType) -> StoragePricing:
    return STORAGE_PRICING.get(deployment, DEFAULT_STORAGE_PRICING)


def is_frozen_category(tier: TierType) -> bool:
    return TIER_STORAGE_CATEGORY[tier] == "frozen"


def storage_rate_per_tb(
    pricing: StoragePricing,
    tier: TierType,
    storage_type: StorageType,
) -> float:
    """Return the $/TB/month rate for a tier's disks under *pricing*."""
    category = TIER_STORAGE_CATEGORY[tier]
    return getattr(pricing, _STORAGE_RATE_FIELD[(category, storage_type)])


def storage_cost(
    storage_gb: float,
    storage_type: StorageType,
    tier: TierType,
    deployment: DeploymentType,
    use_blob_storage: bool = False,
) -> float:
    """Monthly cost of *storage_gb* of storage in *tier*.

    With *use_blob_storage* frozen-category tiers are billed at the object
    storage rate instead of the SSD cache rate; other tiers ignore it.
    """
    pricing = storage_pricing(deployment)
    storage_tb = to_number(storage_gb) / GB_PER_TB
    if use_blob_storage and is_frozen_category(tier):
        return storage_tb * pricing.frozen_blob
    return storage_tb * storage_rate_per_tb(pricing, tier, storage_type)


# ---------------------------------------------------------------------------
# Serverless
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ServerlessPricing:
    """Per-GB serverless rates, in dollars."""
    ingest_per_gb: float
    retention_per_gb_month: float
    egress_per_gb: float
    egress_free_gb: float


SERVERLESS_PRICING: dict[ServerlessTier, ServerlessPricing] = {
    ServerlessTier.LOGS_ESSENTIALS: ServerlessPricing(
        ingest_per_gb=0.07,
        retention_per_gb_month=0.017,
        egress_per_gb=0.05,
        egress_free_gb=50,
    ),
    ServerlessTier.COMPLETE: ServerlessPricing(
        ingest_per_gb=0.09,
        retention_per_gb_month=0.019,
        egress_per_gb=0.05,
        egress_free_gb=50,
    ),
}

# Average retained volume as a fraction of monthly ingest, used when the
# retained volume is not known.
SERVERLESS_RETENTION_RATIO = 0.5


def serverless_cost(
    ingest_gb: float,
    retention_gb: float,
    egress_gb: float,
    tier: ServerlessTier = ServerlessTier.COMPLETE,
) -> ServerlessCost:
    """Monthly serverless cost, rounded to cents.

    The first ``egress_free_gb`` of egress each month are free.
    """
    pricing = SERVERLESS_PRICING[tier]

    ingest = to_number(ingest_gb) * pricing.ingest_per_gb
    retention = to_number(retention_gb) * pricing.retention_per_gb_month
    chargeable_egress = max(0.0, to_number(egress_gb) - pricing.egress_free_gb)
    egress = chargeable_egress * pricing.egress_per_gb

    return ServerlessCost(
        ingest_cost=round_half_up(ingest, 2),
        retention_cost=round_half_up(retention, 2),
        egress_cost=round_half_up(egress, 2),
        total_cost=round_half_up(ingest + retention + egress, 2),
    )
