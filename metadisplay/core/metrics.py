"""
Métriques Prometheus du magasin de configurations.

Ce module définit les compteurs et histogrammes utilisés pour suivre les opérations du magasin et
les échecs de synchronisation du registre de traductions.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

STORE_OPERATIONS = Counter(
    "metadisplay_store_operations_total",
    "Total configuration store operations",
    ["op", "status"],
)
STORE_OP_LATENCY = Histogram(
    "metadisplay_store_operation_seconds",
    "Latency of configuration store operations",
    ["op"],
)
TRANSLATION_SYNC_ERRORS = Counter(
    "metadisplay_translation_sync_errors_total",
    "Translation registry calls that failed",
    ["op"],
)


@contextmanager
def observe_operation(op: str) -> Iterator[None]:
    """Mesure la durée d'une opération et compte son statut (ok/error)."""
    start = time.perf_counter()
    status = "ok"
    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        STORE_OPERATIONS.labels(op=op, status=status).inc()
        STORE_OP_LATENCY.labels(op=op).observe(time.perf_counter() - start)
