"""
Ingest volume conversion
========================

Turns a user-facing ingest volume (``0.5 PB / day`` of traces) into the
document rate the capacity model works with.

Volumes use binary multipliers (1 TB = 1024 GB).  The document rate divides
bytes per second by an average document size, taken from the caller's
override when present and otherwise from the per-data-type defaults below.
``traces``, ``logs`` and ``metrics`` assume OpenTelemetry (OTLP) documents.
"""

from __future__ import annotations

import logging

from cluster_types import (
    DataType,
    IngestVolumeConfig,
    TimeUnit,
    VolumeUnit,
    to_number,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VOLUME_UNIT_BYTES: dict[VolumeUnit, int] = {
    VolumeUnit.PB: 1024 ** 5,
    VolumeUnit.TB: 1024 ** 4,
    VolumeUnit.GB: 1024 ** 3,
    VolumeUnit.MB: 1024 ** 2,
}

TIME_UNIT_SECONDS: dict[TimeUnit, int] = {
    TimeUnit.DAY: 86_400,
    TimeUnit.HOUR: 3_600,
    TimeUnit.MINUTE: 60,
}

# Average document size in KB per data type.
DEFAULT_DOC_SIZE_KB: dict[DataType, float] = {
    DataType.TRACES: 2.5,
    DataType.LOGS: 1.0,
    DataType.METRICS: 0.1,
    DataType.CUSTOM: 1.0,
}

BYTES_PER_KB = 1024
BYTES_PER_GB = 1024 ** 3
BYTES_PER_PB = 1024 ** 5
SECONDS_PER_DAY = 86_400

# Serverless billing assumes a 30-day month.
DAYS_PER_MONTH = 30


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------

def volume_to_bytes(value: float, unit: VolumeUnit) -> float:
    """Convert *value* expressed in *unit* to bytes."""
    return to_number(value) * VOLUME_UNIT_BYTES[unit]


def time_unit_seconds(unit: TimeUnit) -> int:
    return TIME_UNIT_SECONDS[unit]


def average_document_size_kb(
    volume: IngestVolumeConfig,
    data_type: DataType | None = None,
) -> float:
    """Return the document size (KB) used to turn bytes into documents.

    An explicit, non-zero ``avg_document_size_kb`` always wins.  A
    ``CUSTOM`` volume without one falls back to 1 KB, which is only a
    placeholder, so a warning is logged.
    """
    data_type = data_type or volume.data_type
    override = to_number(volume.avg_document_size_kb)
    if override > 0:
        return override
    if data_type is DataType.CUSTOM:
        logger.warning(
            "No average document size given for custom data; assuming %.1f KB",
            DEFAULT_DOC_SIZE_KB[DataType.CUSTOM],
        )
    return DEFAULT_DOC_SIZE_KB.get(data_type, DEFAULT_DOC_SIZE_KB[DataType.CUSTOM])


def bytes_per_second(volume: IngestVolumeConfig) -> float:
    return (
        volume_to_bytes(volume.value, volume.volume_unit)
        / time_unit_seconds(volume.time_unit)
    )


def to_docs_per_second(
    volume: IngestVolumeConfig,
    data_type: DataType | None = None,
) -> float:
    """Convert an ingest volume to documents per second.

    Formula::

        docs/s = (value x unit_bytes / time_unit_seconds) / (doc_KB x 1024)

    Never raises: a missing or malformed magnitude yields 0.

    Parameters
    ----------
    volume : IngestVolumeConfig
        Magnitude, volume unit, time unit and data type.
    data_type : DataType, optional
        Overrides ``volume.data_type`` for the document-size lookup.
    """
    doc_bytes = average_document_size_kb(volume, data_type) * BYTES_PER_KB
    return bytes_per_second(volume) / doc_bytes


def daily_ingest_pb(volume: IngestVolumeConfig) -> float:
    """Normalise an ingest volume to PB per day."""
    per_day = SECONDS_PER_DAY / time_unit_seconds(volume.time_unit)
    return volume_to_bytes(volume.value, volume.volume_unit) * per_day / BYTES_PER_PB


def volume_to_monthly_gb(
    value: float,
    volume_unit: VolumeUnit,
    time_unit: TimeUnit,
) -> float:
    """Convert a volume rate to GB per (30-day) month."""
    per_day = SECONDS_PER_DAY / time_unit_seconds(time_unit)
    return (
        volume_to_bytes(value, volume_unit) / BYTES_PER_GB
        * per_day * DAYS_PER_MONTH
    )


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------

def format_volume(volume: IngestVolumeConfig) -> str:
    return f"{to_number(volume.value):g} {volume.volume_unit.value}/{volume.time_unit.value}"


def format_docs_per_second(docs_per_second: float) -> str:
    """Format a document rate as ``"1.50M docs/s"``, ``"2.00K docs/s"`` or
    ``"750 docs/s"``."""
    if docs_per_second >= 1_000_000:
        return f"{docs_per_second / 1_000_000:.2f}M docs/s"
    if docs_per_second >= 1_000:
        return f"{docs_per_second / 1_000:.2f}K docs/s"
    return f"{docs_per_second:.0f} docs/s"
