"""
Unit tests for the cluster performance/cost estimator.

Tests cover:
- Coefficient tables
- Tier capacity model (ingest capacity, query and ingest latency)
- ops/core resolution
- Aggregation (latency weighting, storage, compression, cost)
- Expected load and capacity utilization
- PB-scale recommendations
- Serverless deployments
- Regression snapshot of the default hot tier
"""

from __future__ import annotations

import json
import math
import unittest
from dataclasses import replace

import cluster_sizing as cs
from cluster_types import (
    ClusterConfig,
    DataType,
    DeploymentType,
    InfrastructureNodes,
    IngestVolumeConfig,
    ServerlessTier,
    StorageType,
    TierConfig,
    TierMetrics,
    TierType,
    TimeUnit,
    VolumeUnit,
    round_half_up,
)
from ingest_volume import to_docs_per_second


def _tier(tier_type: TierType, **changes) -> TierConfig:
    return replace(cs.default_tier_config(tier_type), enabled=True, **changes)


def _hot_only(**changes) -> ClusterConfig:
    """Default cluster (only hot enabled) with optional field overrides."""
    return replace(cs.default_cluster_config(), **changes)


def _with_tiers(*tiers: TierConfig, **changes) -> ClusterConfig:
    return ClusterConfig(tiers=tuple(tiers), **changes)


class TestCoefficientTables(unittest.TestCase):
    """Tests for the tier and storage multiplier tables."""

    def test_every_tier_has_multipliers(self) -> None:
        self.assertEqual(set(cs.TIER_MULTIPLIERS), set(TierType))

    def test_every_storage_type_has_multipliers(self) -> None:
        self.assertEqual(set(cs.STORAGE_MULTIPLIERS), set(StorageType))

    def test_tiers_get_slower_towards_deep_freeze(self) -> None:
        order = [cs.TIER_MULTIPLIERS[t] for t in cs.TIER_ORDER]
        for faster, slower in zip(order, order[1:]):
            self.assertGreater(faster.ingest, slower.ingest)
            self.assertGreater(faster.query, slower.query)

    def test_hot_is_baseline(self) -> None:
        hot = cs.TIER_MULTIPLIERS[TierType.HOT]
        self.assertEqual((hot.ingest, hot.query), (1.0, 1.0))

    def test_deep_freeze_values(self) -> None:
        deep = cs.TIER_MULTIPLIERS[TierType.DEEP_FREEZE]
        self.assertEqual((deep.ingest, deep.query), (0.05, 0.1))


class TestDefaults(unittest.TestCase):
    """Tests for default tier and cluster configs."""

    def test_only_hot_enabled(self) -> None:
        config = cs.default_cluster_config()
        self.assertEqual(
            [t.type for t in config.tiers if t.enabled], [TierType.HOT],
        )

    def test_tiers_in_order(self) -> None:
        config = cs.default_cluster_config()
        self.assertEqual(tuple(t.type for t in config.tiers), cs.TIER_ORDER)

    def test_hot_defaults(self) -> None:
        hot = cs.default_tier_config(TierType.HOT)
        self.assertEqual(hot.node_count, 3)
        self.assertEqual(hot.cpu_cores, 8)
        self.assertEqual(hot.memory_gb, 32)
        self.assertEqual(hot.storage_type, StorageType.SSD)
        self.assertEqual(hot.storage_size_gb, 2000)
        self.assertEqual(hot.retention_hours, 24)

    def test_retention_hours(self) -> None:
        hours = {t: cs.default_tier_config(t).retention_hours for t in TierType}
        self.assertEqual(hours[TierType.WARM], 168)
        self.assertEqual(hours[TierType.COLD], 720)
        self.assertEqual(hours[TierType.FROZEN], 8760)
        self.assertEqual(hours[TierType.DEEP_FREEZE], 8760)

    def test_default_deployment(self) -> None:
        self.assertEqual(
            cs.default_cluster_config().deployment_type, DeploymentType.ELASTIC_CLOUD,
        )


class TestResolveOpsPerCore(unittest.TestCase):
    """Tests for cs.resolve_ops_per_core."""

    def test_default_when_missing(self) -> None:
        self.assertEqual(cs.resolve_ops_per_core(None), 2000)

    def test_default_when_not_positive(self) -> None:
        self.assertEqual(cs.resolve_ops_per_core(0), 2000)
        self.assertEqual(cs.resolve_ops_per_core(-5), 2000)

    def test_default_when_malformed(self) -> None:
        self.assertEqual(cs.resolve_ops_per_core("fast"), 2000)

    def test_in_range_kept(self) -> None:
        self.assertEqual(cs.resolve_ops_per_core(2200), 2200)

    def test_clamped(self) -> None:
        self.assertEqual(cs.resolve_ops_per_core(1000), 2000)
        self.assertEqual(cs.resolve_ops_per_core(9000), 2500)


class TestTierIngestCapacity(unittest.TestCase):
    """Tests for cs.tier_ingest_capacity."""

    def test_hot_ssd_scenario(self) -> None:
        # 2000 x 8 cores x 3 nodes x 1.0 x 1.0 x min(32/64, 1.0) = 24 000
        hot = _tier(TierType.HOT)
        self.assertAlmostEqual(cs.tier_ingest_capacity(hot, 2000), 24_000)

    def test_disabled_is_zero(self) -> None:
        hot = replace(_tier(TierType.HOT), enabled=False)
        self.assertEqual(cs.tier_ingest_capacity(hot, 2000), 0)

    def test_hdd_cuts_to_30_percent(self) -> None:
        hot = _tier(TierType.HOT, storage_type=StorageType.HDD)
        self.assertAlmostEqual(cs.tier_ingest_capacity(hot, 2000), 7_200)

    def test_nvme_boost(self) -> None:
        hot = _tier(TierType.HOT, storage_type=StorageType.NVME)
        self.assertAlmostEqual(cs.tier_ingest_capacity(hot, 2000), 28_800)

    def test_memory_multiplier_capped(self) -> None:
        at_64 = _tier(TierType.HOT, memory_gb=64)
        at_256 = _tier(TierType.HOT, memory_gb=256)
        self.assertAlmostEqual(cs.tier_ingest_capacity(at_64, 2000), 48_000)
        self.assertAlmostEqual(
            cs.tier_ingest_capacity(at_256, 2000),
            cs.tier_ingest_capacity(at_64, 2000),
        )

    def test_warm_multiplier(self) -> None:
        # 2000 x 8 x 2 x 0.8 x 1.0 x 0.5 = 12 800
        warm = _tier(TierType.WARM)
        self.assertAlmostEqual(cs.tier_ingest_capacity(warm, 2000), 12_800)

    def test_linear_in_ops_per_core(self) -> None:
        hot = _tier(TierType.HOT)
        self.assertAlmostEqual(
            cs.tier_ingest_capacity(hot, 2500),
            cs.tier_ingest_capacity(hot, 2000) * 1.25,
        )

    def test_malformed_numbers_yield_zero(self) -> None:
        hot = _tier(TierType.HOT, cpu_cores=None, node_count="three")
        self.assertEqual(cs.tier_ingest_capacity(hot, 2000), 0)


class TestTierQueryLatency(unittest.TestCase):
    """Tests for cs.tier_query_latency."""

    def test_hot_baseline(self) -> None:
        self.assertAlmostEqual(cs.tier_query_latency(_tier(TierType.HOT)), 50.0)

    def test_disabled_is_infinite(self) -> None:
        hot = replace(_tier(TierType.HOT), enabled=False)
        self.assertTrue(math.isinf(cs.tier_query_latency(hot)))

    def test_hdd_multiplies_by_2_5(self) -> None:
        hot = _tier(TierType.HOT, storage_type=StorageType.HDD)
        self.assertAlmostEqual(cs.tier_query_latency(hot), 125.0)

    def test_cpu_factor_floor(self) -> None:
        # 8 / 32 = 0.25 -> floored at 0.5
        hot = _tier(TierType.HOT, cpu_cores=32)
        self.assertAlmostEqual(cs.tier_query_latency(hot), 25.0)

    def test_memory_factor_floor(self) -> None:
        # 32 / 64 = 0.5 -> floored at 0.7
        hot = _tier(TierType.HOT, memory_gb=64)
        self.assertAlmostEqual(cs.tier_query_latency(hot), 35.0)

    def test_cold_default(self) -> None:
        # 50 x 0.4 x 2.5 x (8/4) x (32/16) = 200
        self.assertAlmostEqual(cs.tier_query_latency(_tier(TierType.COLD)), 200.0)

    def test_zero_cores_does_not_blow_up(self) -> None:
        hot = _tier(TierType.HOT, cpu_cores=0, memory_gb=0)
        self.assertAlmostEqual(cs.tier_query_latency(hot), 50.0)


class TestTierIngestLatency(unittest.TestCase):
    """Tests for cs.tier_ingest_latency."""

    def test_hot_baseline(self) -> None:
        self.assertAlmostEqual(cs.tier_ingest_latency(_tier(TierType.HOT)), 10.0)

    def test_disabled_is_infinite(self) -> None:
        hot = replace(_tier(TierType.HOT), enabled=False)
        self.assertTrue(math.isinf(cs.tier_ingest_latency(hot)))

    def test_lower_iops_raises_latency(self) -> None:
        hot = _tier(TierType.HOT, iops=5_000)
        self.assertAlmostEqual(cs.tier_ingest_latency(hot), 20.0)

    def test_iops_factor_floor(self) -> None:
        hot = _tier(TierType.HOT, iops=40_000)
        self.assertAlmostEqual(cs.tier_ingest_latency(hot), 5.0)

    def test_cold_hdd(self) -> None:
        # 10 x 0.3 x 3.0 x 10000/300
        cold = _tier(TierType.COLD)
        self.assertAlmostEqual(cs.tier_ingest_latency(cold), 300.0)

    def test_nvme_faster_than_ssd(self) -> None:
        ssd = _tier(TierType.HOT)
        nvme = _tier(TierType.HOT, storage_type=StorageType.NVME)
        self.assertLess(cs.tier_ingest_latency(nvme), cs.tier_ingest_latency(ssd))


class TestTierStorage(unittest.TestCase):
    """Tests for raw and compressed tier storage."""

    def test_disabled_tier_has_no_storage(self) -> None:
        cold = replace(_tier(TierType.COLD), enabled=False)
        self.assertEqual(cs.tier_storage_gb(cold), 0)
        self.assertEqual(cs.tier_compressed_storage_gb(cold), 0)

    def test_compression_law(self) -> None:
        for tier_type in (TierType.COLD, TierType.FROZEN, TierType.DEEP_FREEZE):
            tier = _tier(tier_type)
            self.assertEqual(
                cs.tier_compressed_storage_gb(tier),
                tier.storage_size_gb * tier.node_count * 0.47,
            )

    def test_hot_and_warm_uncompressed(self) -> None:
        for tier_type in (TierType.HOT, TierType.WARM):
            tier = _tier(tier_type)
            self.assertEqual(
                cs.tier_compressed_storage_gb(tier), cs.tier_storage_gb(tier),
            )


class TestDefaultHotSnapshot(unittest.TestCase):
    """Regression baseline: default config, only the hot tier enabled."""

    def setUp(self) -> None:
        self.metrics = cs.compute_metrics(cs.default_cluster_config())

    def test_performance(self) -> None:
        self.assertEqual(self.metrics.max_ingest_rate, 24_000)
        self.assertEqual(self.metrics.avg_query_latency, 50.0)
        self.assertEqual(self.metrics.avg_ingest_latency, 10.0)
        self.assertEqual(self.metrics.storage_efficiency, 90.0)
        self.assertEqual(self.metrics.ops_per_core, 2000)

    def test_cost(self) -> None:
        # 512 x 3 nodes; 6000 GB / 1024 x $170/TB (GCP rates)
        self.assertEqual(self.metrics.compute_cost, 1_536)
        self.assertEqual(self.metrics.storage_cost, 996)
        self.assertEqual(self.metrics.infrastructure_cost, 0)
        self.assertEqual(self.metrics.cost_estimate, 2_532)

    def test_storage(self) -> None:
        self.assertEqual(self.metrics.total_storage_gb, 6_000)
        self.assertEqual(self.metrics.compressed_storage_gb, 6_000)

    def test_optional_outputs_absent(self) -> None:
        self.assertIsNone(self.metrics.expected_ingest_rate)
        self.assertIsNone(self.metrics.capacity_utilization)
        self.assertIsNone(self.metrics.serverless_cost)
        self.assertEqual(self.metrics.recommendations, ())

    def test_breakdown(self) -> None:
        self.assertEqual(
            self.metrics.tier_breakdown,
            (TierMetrics(
                tier=TierType.HOT,
                ingest_capacity=24_000,
                query_latency=50.0,
                ingest_latency=10.0,
                storage_used_gb=6_000,
                compressed_storage_gb=6_000,
            ),),
        )


class TestComputeMetricsEmpty(unittest.TestCase):
    """No enabled tiers yields all-zero metrics, not an error."""

    def _assert_zero(self, config: ClusterConfig) -> None:
        m = cs.compute_metrics(config)
        self.assertEqual(m.max_ingest_rate, 0)
        self.assertEqual(m.avg_query_latency, 0)
        self.assertEqual(m.avg_ingest_latency, 0)
        self.assertEqual(m.storage_efficiency, 0)
        self.assertEqual(m.cost_estimate, 0)
        self.assertEqual(m.total_storage_gb, 0)
        self.assertEqual(m.tier_breakdown, ())

    def test_no_tiers(self) -> None:
        self._assert_zero(ClusterConfig())

    def test_all_disabled(self) -> None:
        config = cs.default_cluster_config()
        tiers = tuple(replace(t, enabled=False) for t in config.tiers)
        self._assert_zero(replace(config, tiers=tiers))

    def test_zero_node_weight(self) -> None:
        config = _with_tiers(_tier(TierType.HOT, node_count=0))
        m = cs.compute_metrics(config)
        self.assertEqual(m.avg_query_latency, 0)
        self.assertEqual(m.avg_ingest_latency, 0)


class TestComputeMetricsAggregation(unittest.TestCase):
    """Tests for cluster-wide aggregation."""

    def test_disabled_tiers_contribute_nothing(self) -> None:
        huge_warm = replace(
            cs.default_tier_config(TierType.WARM),
            node_count=500, storage_size_gb=1_000_000, cpu_cores=128,
        )
        hot = _tier(TierType.HOT)
        with_disabled = cs.compute_metrics(_with_tiers(hot, huge_warm))
        without = cs.compute_metrics(_with_tiers(hot))
        self.assertEqual(with_disabled, without)

    def test_capacity_is_sum_of_tiers(self) -> None:
        config = _with_tiers(_tier(TierType.HOT), _tier(TierType.WARM))
        self.assertEqual(cs.compute_metrics(config).max_ingest_rate, 24_000 + 12_800)

    def test_node_weighted_latency(self) -> None:
        # hot: 3 nodes @ 50 ms / 10 ms; cold: 2 nodes @ 200 ms / 300 ms
        config = _with_tiers(_tier(TierType.HOT), _tier(TierType.COLD))
        m = cs.compute_metrics(config)
        self.assertEqual(m.avg_query_latency, 110.0)
        self.assertEqual(m.avg_ingest_latency, 126.0)

    def test_storage_efficiency_and_compression(self) -> None:
        config = _with_tiers(_tier(TierType.HOT), _tier(TierType.COLD))
        m = cs.compute_metrics(config)
        # (6000 x 0.9 + 20000 x 0.6) / 26000
        self.assertEqual(m.storage_efficiency, 66.9)
        self.assertEqual(m.total_storage_gb, 26_000)
        self.assertEqual(m.compressed_storage_gb, 6_000 + 9_400)

    def test_ops_per_core_override(self) -> None:
        m = cs.compute_metrics(_hot_only(ops_per_core=2500))
        self.assertEqual(m.max_ingest_rate, 30_000)
        self.assertEqual(m.ops_per_core, 2500)

    def test_breakdown_lists_enabled_tiers_in_order(self) -> None:
        config = _with_tiers(
            _tier(TierType.HOT),
            replace(cs.default_tier_config(TierType.WARM), enabled=False),
            _tier(TierType.FROZEN),
        )
        m = cs.compute_metrics(config)
        self.assertEqual(
            [b.tier for b in m.tier_breakdown], [TierType.HOT, TierType.FROZEN],
        )

    def test_repeatable(self) -> None:
        config = _with_tiers(_tier(TierType.HOT), _tier(TierType.COLD))
        self.assertEqual(cs.compute_metrics(config), cs.compute_metrics(config))

    def test_malformed_numbers_do_not_raise(self) -> None:
        config = _with_tiers(
            _tier(TierType.HOT, node_count="abc", cpu_cores=None, iops="x"),
        )
        m = cs.compute_metrics(config)
        self.assertEqual(m.max_ingest_rate, 0)
        self.assertEqual(m.cost_estimate, 0)


class TestComputeMetricsCost(unittest.TestCase):
    """Tests for compute, infrastructure and storage cost."""

    def test_aws_hot_only(self) -> None:
        m = cs.compute_metrics(_hot_only(deployment_type=DeploymentType.AWS))
        # 1200 x 3; 6000 / 1024 x 180 = 1054.69
        self.assertEqual(m.compute_cost, 3_600)
        self.assertEqual(m.storage_cost, 1_055)
        self.assertEqual(m.cost_estimate, 4_655)

    def test_infrastructure_nodes(self) -> None:
        infra = InfrastructureNodes(master_nodes=3, ml_nodes=1, ui_nodes=2)
        m = cs.compute_metrics(_hot_only(infrastructure_nodes=infra))
        self.assertEqual(m.infrastructure_cost, 512 * 6)
        self.assertEqual(m.compute_cost, 1_536 + 3_072)
        self.assertEqual(m.cost_estimate, 5_604)

    def test_cold_hdd_uses_cold_rate(self) -> None:
        config = _with_tiers(_tier(TierType.COLD), deployment_type=DeploymentType.GCP)
        m = cs.compute_metrics(config)
        # 20000 / 1024 x $40 = 781.25
        self.assertEqual(m.storage_cost, 781)
        self.assertEqual(m.compute_cost, 1_134 * 2)

    def test_frozen_blob_storage_for_pb_per_day(self) -> None:
        config = _with_tiers(
            _tier(TierType.FROZEN),
            deployment_type=DeploymentType.GCP,
            ingest_volume=IngestVolumeConfig(value=0.5),
        )
        m = cs.compute_metrics(config)
        # SSD cache: 20000 / 1024 x 170 = 3320.31
        # blob: 0.5 PB x 30 days x 0.47 = 7.05 PB = 7219.2 TB x $20 = 144384
        self.assertEqual(m.storage_cost, 147_704)
        self.assertEqual(m.cost_estimate, 148_838)

    def test_no_blob_storage_for_other_units(self) -> None:
        config = _with_tiers(
            _tier(TierType.FROZEN),
            deployment_type=DeploymentType.GCP,
            ingest_volume=IngestVolumeConfig(value=512, volume_unit=VolumeUnit.TB),
        )
        self.assertEqual(cs.compute_metrics(config).storage_cost, 3_320)

    def test_no_blob_storage_for_hot(self) -> None:
        base = cs.compute_metrics(_hot_only())
        with_volume = cs.compute_metrics(
            _hot_only(ingest_volume=IngestVolumeConfig(value=0.1)),
        )
        self.assertEqual(base.storage_cost, with_volume.storage_cost)


class TestExpectedLoad(unittest.TestCase):
    """Tests for expected ingest rate and capacity utilization."""

    def test_utilization(self) -> None:
        volume = IngestVolumeConfig(
            value=1, volume_unit=VolumeUnit.GB, time_unit=TimeUnit.HOUR,
            data_type=DataType.LOGS,
        )
        m = cs.compute_metrics(_hot_only(ingest_volume=volume))
        rate = to_docs_per_second(volume)
        self.assertEqual(m.expected_ingest_rate, round_half_up(rate))
        self.assertEqual(m.capacity_utilization, round_half_up(rate / 24_000 * 100, 1))

    def test_over_capacity(self) -> None:
        m = cs.compute_metrics(_hot_only(ingest_volume=IngestVolumeConfig(value=0.1)))
        self.assertGreater(m.capacity_utilization, 100)

    def test_undefined_without_capacity(self) -> None:
        m = cs.compute_metrics(
            ClusterConfig(ingest_volume=IngestVolumeConfig(value=1)),
        )
        self.assertIsNotNone(m.expected_ingest_rate)
        self.assertIsNone(m.capacity_utilization)


class TestRecommendations(unittest.TestCase):
    """Tests for PB-scale recommendations."""

    def test_none_below_threshold(self) -> None:
        m = cs.compute_metrics(_hot_only(ingest_volume=IngestVolumeConfig(value=0.29)))
        self.assertEqual(m.recommendations, ())

    def test_comparison_at_threshold(self) -> None:
        m = cs.compute_metrics(_hot_only(ingest_volume=IngestVolumeConfig(value=0.3)))
        self.assertEqual(m.recommendations, (
            "Hot tier: 3 nodes (recommended: 160)",
            "Hot tier storage: 1.95 TB/node (recommended: 4 TB/node)",
            "Cold tier: 0 nodes (recommended: 60)",
            "Cold tier storage: 0 TB/node (recommended: 10 TB/node)",
            "Frozen tier: 0 nodes (recommended: 66)",
        ))

    def test_threshold_uses_normalised_volume(self) -> None:
        # 0.4 PB/day expressed in GB/day
        volume = IngestVolumeConfig(value=0.4 * 1024 * 1024, volume_unit=VolumeUnit.GB)
        m = cs.compute_metrics(_hot_only(ingest_volume=volume))
        self.assertEqual(len(m.recommendations), 5)

    def test_storage_and_split_advice(self) -> None:
        m = cs.compute_metrics(_hot_only(ingest_volume=IngestVolumeConfig(value=0.5)))
        self.assertEqual(len(m.recommendations), 7)
        self.assertIn(
            "Estimated 30-day frozen storage: 7.05 PB (after 53% compression)",
            m.recommendations,
        )
        self.assertIn(
            "At 0.50 PB/day, consider splitting ingest across multiple clusters",
            m.recommendations,
        )

    def test_reference_layout_has_no_differences(self) -> None:
        config = _with_tiers(
            _tier(TierType.HOT, node_count=160, storage_size_gb=4 * 1024),
            _tier(TierType.COLD, node_count=60, storage_size_gb=10 * 1024),
            _tier(TierType.FROZEN, node_count=66, storage_size_gb=10 * 1024),
            ingest_volume=IngestVolumeConfig(value=0.4),
        )
        self.assertEqual(cs.compute_metrics(config).recommendations, ())


class TestServerless(unittest.TestCase):
    """The serverless deployment type bypasses the hardware model."""

    def setUp(self) -> None:
        self.config = _hot_only(
            deployment_type=DeploymentType.SERVERLESS,
            ingest_volume=IngestVolumeConfig(
                value=1, volume_unit=VolumeUnit.TB, data_type=DataType.LOGS,
            ),
        )

    def test_cost(self) -> None:
        # 1 TB/day = 30720 GB/month; retained 15360 GB
        m = cs.compute_metrics(self.config)
        self.assertAlmostEqual(m.serverless_cost.ingest_cost, 2764.80)
        self.assertAlmostEqual(m.serverless_cost.retention_cost, 291.84)
        self.assertAlmostEqual(m.serverless_cost.egress_cost, 0)
        self.assertAlmostEqual(m.cost_estimate, 3056.64)

    def test_hardware_model_bypassed(self) -> None:
        m = cs.compute_metrics(self.config)
        self.assertEqual(m.max_ingest_rate, 0)
        self.assertEqual(m.compute_cost, 0)
        self.assertEqual(m.storage_cost, 0)
        self.assertEqual(m.tier_breakdown, ())
        self.assertIsNone(m.capacity_utilization)

    def test_expected_rate_reported(self) -> None:
        m = cs.compute_metrics(self.config)
        self.assertEqual(
            m.expected_ingest_rate,
            round_half_up(to_docs_per_second(self.config.ingest_volume)),
        )

    def test_logs_essentials_cheaper(self) -> None:
        essentials = replace(self.config, serverless_tier=ServerlessTier.LOGS_ESSENTIALS)
        self.assertLess(
            cs.compute_metrics(essentials).cost_estimate,
            cs.compute_metrics(self.config).cost_estimate,
        )

    def test_no_volume_is_free(self) -> None:
        config = replace(self.config, ingest_volume=None)
        self.assertEqual(cs.compute_metrics(config).cost_estimate, 0)

    def test_no_hardware_advice(self) -> None:
        config = replace(self.config, ingest_volume=IngestVolumeConfig(value=0.5))
        self.assertEqual(cs.compute_metrics(config).recommendations, (
            "Estimated 30-day frozen storage: 7.05 PB (after 53% compression)",
            "At 0.50 PB/day, consider splitting ingest across multiple clusters",
        ))

    def test_no_advice_below_split_threshold(self) -> None:
        config = replace(self.config, ingest_volume=IngestVolumeConfig(value=0.3))
        self.assertEqual(cs.compute_metrics(config).recommendations, ())


class TestOutputFormat(unittest.TestCase):
    """Tests for the summary and dict forms of the metrics."""

    def test_summary_contains_key_info(self) -> None:
        m = cs.compute_metrics(_hot_only(ingest_volume=IngestVolumeConfig(value=0.5)))
        self.assertIn("Deployment: elastic_cloud", m.summary)
        self.assertIn("Ingest volume: 0.5 PB/day (traces)", m.summary)
        self.assertIn("24.00K docs/s", m.summary)
        self.assertIn("--- Recommendations ---", m.summary)

    def test_serverless_summary(self) -> None:
        m = cs.compute_metrics(_hot_only(deployment_type=DeploymentType.SERVERLESS))
        self.assertIn("--- Serverless cost (monthly) ---", m.summary)

    def test_to_dict_is_json_safe(self) -> None:
        m = cs.compute_metrics(_with_tiers(
            _tier(TierType.HOT), _tier(TierType.COLD),
            ingest_volume=IngestVolumeConfig(value=0.5),
        ))
        data = json.loads(json.dumps(m.to_dict()))
        self.assertEqual(data["tier_breakdown"][1]["tier"], "cold")
        self.assertIn("capacity_utilization", data)

    def test_to_dict_omits_undefined(self) -> None:
        data = cs.compute_metrics(cs.default_cluster_config()).to_dict()
        self.assertNotIn("expected_ingest_rate", data)
        self.assertNotIn("capacity_utilization", data)
        self.assertNotIn("serverless_cost", data)


if __name__ == "__main__":
    unittest.main()
