"""
Flask web application for the Cluster Tuner calculator.

Serves a single-page UI and exposes JSON endpoints that delegate to
``cluster_sizing.compute_metrics`` and ``pricing.serverless_cost``.  The
form state is persisted with ``config_store.ConfigStore`` in the directory
named by ``CLUSTER_TUNER_STATE_DIR`` (default ``~/.cluster-tuner``).
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

# Allow importing the estimator modules from the parent directory.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from flask import Flask, jsonify, render_template, request

import cluster_sizing as cs
import config_store
import hardware_skus
import pricing
from cluster_types import DeploymentType, ServerlessTier

logger = logging.getLogger(__name__)

DEFAULT_STATE_DIR = Path.home() / ".cluster-tuner"

app = Flask(__name__)
app.config["STATE_DIR"] = os.environ.get("CLUSTER_TUNER_STATE_DIR", str(DEFAULT_STATE_DIR))


def _store() -> config_store.ConfigStore:
    return config_store.ConfigStore(app.config["STATE_DIR"])


@app.route("/")
def index():
    """Serve the single-page calculator."""
    return render_template("index.html")


@app.route("/api/compute", methods=["POST"])
def compute():
    """Run the estimator on the posted cluster config and return the metrics."""
    data = request.get_json(force=True)

    try:
        config = config_store.config_from_dict(data)
    except (ValueError, TypeError) as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify(cs.compute_metrics(config).to_dict())


@app.route("/api/serverless", methods=["POST"])
def serverless():
    """Price a serverless usage profile."""
    data = request.get_json(force=True)
    if not isinstance(data, dict):
        return jsonify({"error": "request body must be a JSON object"}), 400

    try:
        tier = ServerlessTier(data.get("tier", ServerlessTier.COMPLETE.value))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    cost = pricing.serverless_cost(
        ingest_gb=data.get("ingest_gb", 0),
        retention_gb=data.get("retention_gb", 0),
        egress_gb=data.get("egress_gb", 0),
        tier=tier,
    )
    return jsonify(cost.to_dict())


@app.route("/api/skus")
def skus():
    """List hardware SKUs, optionally filtered by ``?deployment=``."""
    deployment = request.args.get("deployment")
    if deployment is None:
        catalog = hardware_skus.HARDWARE_SKUS
    else:
        try:
            catalog = hardware_skus.skus_for_deployment(DeploymentType(deployment))
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400

    return jsonify([
        {
            "id": sku.id,
            "name": sku.name,
            "description": sku.description,
            "storage_type": sku.storage_type.value,
            "storage_size_gb": sku.storage_size_gb,
            "cpu_cores": sku.cpu_cores,
            "memory_gb": sku.memory_gb,
            "iops": sku.iops,
            "throughput_mbps": sku.throughput_mbps,
            "cost_per_month": sku.cost_per_month,
            "deployment_types": [d.value for d in sku.deployment_types],
        }
        for sku in catalog
    ])


@app.route("/api/config", methods=["GET"])
def load_config():
    """Return the saved form state, or the defaults if nothing is saved."""
    config = _store().load() or cs.default_cluster_config()
    return jsonify(config_store.config_to_dict(config))


@app.route("/api/config", methods=["PUT"])
def save_config():
    data = request.get_json(force=True)

    try:
        config = config_store.config_from_dict(data)
    except (ValueError, TypeError) as exc:
        return jsonify({"error": str(exc)}), 400

    saved = _store().save(config)
    return jsonify({"saved": saved})


@app.route("/api/config", methods=["DELETE"])
def clear_config():
    _store().clear()
    return "", 204


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info("Persisting form state in %s", app.config["STATE_DIR"])
    app.run(host="127.0.0.1", port=5050)
