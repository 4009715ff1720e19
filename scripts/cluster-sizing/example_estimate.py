#!/usr/bin/env python3
"""Print an example estimate for the default cluster at 0.5 PB/day of traces.

Usage::

    python3 example_estimate.py
"""

from dataclasses import replace

from cluster_sizing import compute_metrics, default_cluster_config
from cluster_types import IngestVolumeConfig


def main() -> None:
    config = replace(
        default_cluster_config(),
        ingest_volume=IngestVolumeConfig(value=0.5),
    )
    metrics = compute_metrics(config)

    print("=" * 60)
    print("  Cluster Tuner - Default Tiers, 0.5 PB/day of traces")
    print("=" * 60)
    print()
    for tier in config.tiers:
        state = "on " if tier.enabled else "off"
        print(
            f"  {tier.type.value:<12} [{state}] {tier.node_count:>3} x "
            f"{tier.cpu_cores:>2} cores / {tier.memory_gb:>3} GB / "
            f"{tier.storage_size_gb:>6,} GB {tier.storage_type.value}"
        )
    print()
    print(metrics.summary)
    print()


if __name__ == "__main__":
    main()
