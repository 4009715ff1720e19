"""
Persistence of the calculator's form state.

A single JSON snapshot of the cluster configuration is kept under a fixed
storage key.  It is loaded on startup and saved on every change.  Failures
are logged and never propagate: a corrupted snapshot is discarded and the
caller falls back to defaults; a failed write leaves the in-memory state
untouched.

:func:`config_to_dict` / :func:`config_from_dict` define the JSON shape,
which is also the request body of the web API.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from cluster_sizing import default_tier_config
from cluster_types import (
    TIER_ORDER,
    ClusterConfig,
    DataType,
    DeploymentType,
    InfrastructureNodes,
    IngestVolumeConfig,
    ServerlessTier,
    StorageType,
    TierConfig,
    TierType,
    TimeUnit,
    VolumeUnit,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "cluster-tuner-config"

_TIER_NUMERIC_FIELDS = (
    "retention_hours",
    "node_count",
    "storage_size_gb",
    "cpu_cores",
    "memory_gb",
    "iops",
    "throughput_mbps",
)

_INFRA_FIELDS = ("master_nodes", "coordinating_nodes", "ml_nodes", "ui_nodes")


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------

def tier_to_dict(tier: TierConfig) -> dict[str, Any]:
    out: dict[str, Any] = {
        "type": tier.type.value,
        "enabled": tier.enabled,
        "storage_type": tier.storage_type.value,
    }
    for name in _TIER_NUMERIC_FIELDS:
        out[name] = getattr(tier, name)
    if tier.sku_id is not None:
        out["sku_id"] = tier.sku_id
    return out


def config_to_dict(config: ClusterConfig) -> dict[str, Any]:
    out: dict[str, Any] = {
        "deployment_type": config.deployment_type.value,
        "tiers": [tier_to_dict(t) for t in config.tiers],
        "serverless_tier": config.serverless_tier.value,
        "serverless_egress_gb": config.serverless_egress_gb,
    }
    if config.ingest_volume is not None:
        vol = config.ingest_volume
        out["ingest_volume"] = {
            "value": vol.value,
            "volume_unit": vol.volume_unit.value,
            "time_unit": vol.time_unit.value,
            "data_type": vol.data_type.value,
        }
        if vol.avg_document_size_kb is not None:
            out["ingest_volume"]["avg_document_size_kb"] = vol.avg_document_size_kb
    if config.infrastructure_nodes is not None:
        out["infrastructure_nodes"] = {
            name: getattr(config.infrastructure_nodes, name) for name in _INFRA_FIELDS
        }
    if config.ops_per_core is not None:
        out["ops_per_core"] = config.ops_per_core
    return out


def _require_mapping(value: object, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _require_bool(value: object, what: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{what} must be true or false, got {value!r}")
    return value


def tier_from_dict(data: object) -> TierConfig:
    """Build a tier from *data*, filling absent fields with tier defaults."""
    data = _require_mapping(data, "tier")
    tier = default_tier_config(TierType(data.get("type")))
    fields: dict[str, Any] = {
        "enabled": _require_bool(data.get("enabled", tier.enabled), "enabled"),
        "storage_type": StorageType(data.get("storage_type", tier.storage_type.value)),
        "sku_id": data.get("sku_id"),
    }
    for name in _TIER_NUMERIC_FIELDS:
        fields[name] = data.get(name, getattr(tier, name))
    return TierConfig(type=tier.type, **fields)


def ingest_volume_from_dict(data: object) -> IngestVolumeConfig:
    """Build an ingest volume; missing units default to traces in PB/day."""
    data = _require_mapping(data, "ingest_volume")
    return IngestVolumeConfig(
        value=data.get("value", 0),
        volume_unit=VolumeUnit(data.get("volume_unit") or VolumeUnit.PB.value),
        time_unit=TimeUnit(data.get("time_unit") or TimeUnit.DAY.value),
        data_type=DataType(data.get("data_type") or DataType.TRACES.value),
        avg_document_size_kb=data.get("avg_document_size_kb"),
    )


def config_from_dict(data: object) -> ClusterConfig:
    """Build a :class:`ClusterConfig` from its JSON form.

    Tiers missing from ``tiers`` are filled in with their defaults so the
    result always holds one entry per tier type, in tier order.  Numeric
    fields are passed through as given; the estimator coerces them.

    Raises
    ------
    ValueError
        On unknown enum names, duplicate tiers or non-object sections.
    """
    data = _require_mapping(data, "config")

    tiers_by_type: dict[TierType, TierConfig] = {}
    raw_tiers = data.get("tiers")
    if raw_tiers is None:
        raw_tiers = []
    if not isinstance(raw_tiers, list):
        raise ValueError("tiers must be a list")
    for raw in raw_tiers:
        tier = tier_from_dict(raw)
        if tier.type in tiers_by_type:
            raise ValueError(f"duplicate tier: {tier.type.value}")
        tiers_by_type[tier.type] = tier
    tiers = tuple(
        tiers_by_type.get(t) or default_tier_config(t) for t in TIER_ORDER
    )

    volume = data.get("ingest_volume")
    infra = data.get("infrastructure_nodes")
    if infra is not None:
        infra = _require_mapping(infra, "infrastructure_nodes")

    return ClusterConfig(
        deployment_type=DeploymentType(
            data.get("deployment_type", DeploymentType.ELASTIC_CLOUD.value)
        ),
        tiers=tiers,
        ingest_volume=ingest_volume_from_dict(volume) if volume is not None else None,
        infrastructure_nodes=(
            InfrastructureNodes(**{k: infra.get(k, 0) for k in _INFRA_FIELDS})
            if infra is not None
            else None
        ),
        ops_per_core=data.get("ops_per_core"),
        serverless_tier=ServerlessTier(
            data.get("serverless_tier", ServerlessTier.COMPLETE.value)
        ),
        serverless_egress_gb=data.get("serverless_egress_gb", 0),
    )


# ---------------------------------------------------------------------------
# Snapshot store
# ---------------------------------------------------------------------------

class ConfigStore:
    """Single-snapshot JSON store at ``<directory>/<key>.json``."""

    def __init__(self, directory: str | Path, key: str = STORAGE_KEY) -> None:
        self.path = Path(directory) / f"{key}.json"

    def save(self, config: ClusterConfig) -> bool:
        """Write *config*; returns ``False`` (and logs) on failure.

        The snapshot is written to a sibling temporary file and moved into
        place, so a reader never sees a partial write.
        """
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            text = json.dumps(config_to_dict(config), indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to save configuration to %s: %s", self.path, exc)
            if tmp_path.exists():
                tmp_path.unlink()
            return False
        return True

    def load(self) -> ClusterConfig | None:
        """Read the saved snapshot, or ``None`` if absent or unreadable.

        A snapshot that cannot be decoded or parsed is removed.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
            return config_from_dict(json.loads(text))
        except FileNotFoundError:
            return None
        except (ValueError, TypeError) as exc:
            # UnicodeDecodeError and JSONDecodeError are both ValueErrors.
            logger.error("Discarding corrupted configuration %s: %s", self.path, exc)
            self.clear()
            return None
        except OSError as exc:
            logger.error("Failed to load configuration from %s: %s", self.path, exc)
            return None

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Failed to clear configuration %s: %s", self.path, exc)
