"""
Static catalog of hardware templates used to pre-populate tier settings.

Cloud prices are monthly on-demand list prices as of 2026-10.  The on-prem
profiles are amortised estimates.  The serverless deployment type has no
hardware and therefore no SKUs.
"""

from __future__ import annotations

from dataclasses import replace

from cluster_types import DeploymentType, HardwareSKU, StorageType, TierConfig

_ON_PREM = (DeploymentType.ON_PREM,)
_AWS = (DeploymentType.AWS,)
_GCP = (DeploymentType.GCP,)
_AZURE = (DeploymentType.AZURE,)
_ELASTIC_CLOUD = (DeploymentType.ELASTIC_CLOUD,)


HARDWARE_SKUS: list[HardwareSKU] = [
    # --- On-prem profiles ---
    HardwareSKU("ssd-small", "SSD Small", StorageType.SSD, 500, 4, 16, 3_000, 500, 150, _ON_PREM),
    HardwareSKU("ssd-medium", "SSD Medium", StorageType.SSD, 2_000, 8, 32, 10_000, 1_000, 400, _ON_PREM),
    HardwareSKU("ssd-large", "SSD Large", StorageType.SSD, 5_000, 16, 64, 20_000, 2_000, 1_000, _ON_PREM),
    HardwareSKU("hdd-small", "HDD Small", StorageType.HDD, 2_000, 4, 16, 150, 150, 80, _ON_PREM),
    HardwareSKU("hdd-medium", "HDD Medium", StorageType.HDD, 5_000, 8, 32, 300, 200, 200, _ON_PREM),
    HardwareSKU("hdd-large", "HDD Large", StorageType.HDD, 10_000, 16, 64, 500, 300, 400, _ON_PREM),
    HardwareSKU("nvme-premium", "NVMe Premium", StorageType.NVME, 2_000, 16, 64, 50_000, 3_000, 1_500, _ON_PREM),

    # --- AWS ---
    HardwareSKU(
        "aws-i3en-8xlarge", "i3en.8xlarge", StorageType.NVME, 20_000, 32, 256,
        1_000_000, 4_000, 2_600, _AWS,
        description="Storage-optimised, local NVMe (hot/cold)",
    ),
    HardwareSKU(
        "aws-r6gd-8xlarge", "r6gd.8xlarge", StorageType.NVME, 1_900, 32, 256,
        160_000, 2_000, 1_350, _AWS,
        description="Memory-optimised with NVMe cache (frozen)",
    ),
    HardwareSKU(
        "aws-m6i-8xlarge-gp3", "m6i.8xlarge + gp3", StorageType.SSD, 4_000, 32, 128,
        16_000, 1_000, 1_200, _AWS,
        description="General purpose with EBS gp3",
    ),
    HardwareSKU(
        "aws-d3-4xlarge", "d3.4xlarge", StorageType.HDD, 47_520, 16, 128,
        2_000, 1_160, 1_460, _AWS,
        description="Dense HDD storage (cold/deep freeze)",
    ),

    # --- GCP ---
    HardwareSKU(
        "gcp-n2-standard-32-pd-ssd", "n2-standard-32 + pd-ssd", StorageType.SSD, 4_000, 32, 128,
        60_000, 1_200, 1_134, _GCP,
        description="General purpose with persistent SSD (hot)",
    ),
    HardwareSKU(
        "gcp-n2-highmem-32-local-ssd", "n2-highmem-32 + local SSD", StorageType.NVME, 3_000, 32, 256,
        680_000, 2_650, 1_520, _GCP,
        description="Memory-optimised with local NVMe (frozen cache)",
    ),
    HardwareSKU(
        "gcp-n2-standard-32-pd-standard", "n2-standard-32 + pd-standard", StorageType.HDD, 10_000, 32, 128,
        7_500, 400, 1_010, _GCP,
        description="General purpose with standard persistent disk (cold)",
    ),

    # --- Azure ---
    HardwareSKU(
        "azure-l32s-v3", "Standard_L32s_v3", StorageType.NVME, 7_680, 32, 256,
        1_600_000, 8_000, 1_950, _AZURE,
        description="Storage-optimised, local NVMe",
    ),
    HardwareSKU(
        "azure-e32ds-v5-premium", "Standard_E32ds_v5 + Premium SSD", StorageType.SSD, 4_000, 32, 256,
        20_000, 900, 1_150, _AZURE,
        description="Memory-optimised with Premium SSD",
    ),
    HardwareSKU(
        "azure-d32s-v5-standard-hdd", "Standard_D32s_v5 + Standard HDD", StorageType.HDD, 16_000, 32, 128,
        2_000, 500, 980, _AZURE,
        description="General purpose with Standard HDD",
    ),

    # --- Elastic Cloud ---
    HardwareSKU(
        "ec-hot-storage-optimized", "Hot (storage optimized)", StorageType.SSD, 3_840, 8, 64,
        20_000, 1_000, 512, _ELASTIC_CLOUD,
        description="64 GB RAM data node, 1:60 RAM:disk",
    ),
    HardwareSKU(
        "ec-hot-cpu-optimized", "Hot (CPU optimized)", StorageType.NVME, 1_920, 16, 64,
        40_000, 2_000, 700, _ELASTIC_CLOUD,
        description="64 GB RAM data node, 1:30 RAM:disk",
    ),
    HardwareSKU(
        "ec-cold-storage-optimized", "Cold (storage optimized)", StorageType.HDD, 12_000, 8, 64,
        3_000, 400, 380, _ELASTIC_CLOUD,
        description="64 GB RAM data node, 1:190 RAM:disk",
    ),
    HardwareSKU(
        "ec-frozen-cache", "Frozen (searchable snapshot cache)", StorageType.SSD, 10_000, 8, 64,
        20_000, 1_000, 450, _ELASTIC_CLOUD,
        description="64 GB RAM node with local cache, 1:160 RAM:cache",
    ),
]

_SKUS_BY_ID: dict[str, HardwareSKU] = {sku.id: sku for sku in HARDWARE_SKUS}


def skus_for_deployment(deployment: DeploymentType) -> list[HardwareSKU]:
    """Return the SKUs available for *deployment*, in catalog order."""
    return [sku for sku in HARDWARE_SKUS if deployment in sku.deployment_types]


def get_sku(sku_id: str) -> HardwareSKU:
    """Look up a SKU by id.

    Raises
    ------
    KeyError
        If *sku_id* is not in the catalog.
    """
    try:
        return _SKUS_BY_ID[sku_id]
    except KeyError:
        raise KeyError(f"Unknown hardware SKU: {sku_id!r}") from None


def apply_sku(tier: TierConfig, sku: HardwareSKU) -> TierConfig:
    """Copy *sku*'s hardware into a new :class:`TierConfig`.

    Node count, retention and the enabled flag are left as they were.
    """
    return replace(
        tier,
        sku_id=sku.id,
        storage_type=sku.storage_type,
        storage_size_gb=sku.storage_size_gb,
        cpu_cores=sku.cpu_cores,
        memory_gb=sku.memory_gb,
        iops=sku.iops,
        throughput_mbps=sku.throughput_mbps,
    )
