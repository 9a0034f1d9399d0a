"""Monitoring helpers and Prometheus metrics exporters."""
from __future__ import annotations

from typing import Final

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

_HTTP_REQUEST_TOTAL: Final = Counter(
    "vietqr_http_requests_total",
    "Total HTTP requests",
    labelnames=("method", "route", "status"),
)
_HTTP_REQUEST_LATENCY: Final = Histogram(
    "vietqr_http_request_duration_seconds",
    "Latency of HTTP requests",
    labelnames=("method", "route"),
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1),
)
_SERVICE_ERRORS_TOTAL: Final = Counter(
    "vietqr_service_errors_total",
    "Service-level errors by code",
    labelnames=("code", "route"),
)
_PAYLOADS_DECODED_TOTAL: Final = Counter(
    "vietqr_payloads_decoded_total",
    "Decoded payloads by resulting payment flow",
    labelnames=("flow", "crc_valid"),
)
_PAYLOADS_GENERATED_TOTAL: Final = Counter(
    "vietqr_payloads_generated_total",
    "Generated payloads by initiation method",
    labelnames=("init_method",),
)


def observe_request(method: str, route: str, status_code: int, duration_ms: float) -> None:
    _HTTP_REQUEST_TOTAL.labels(method=method, route=route, status=str(status_code)).inc()
    _HTTP_REQUEST_LATENCY.labels(method=method, route=route).observe(duration_ms / 1000)


def record_service_error(code: str, route: str) -> None:
    _SERVICE_ERRORS_TOTAL.labels(code=code, route=route).inc()


def record_decoded(flow: str, crc_valid: bool) -> None:
    _PAYLOADS_DECODED_TOTAL.labels(flow=flow, crc_valid=str(crc_valid).lower()).inc()


def record_generated(init_method: str) -> None:
    _PAYLOADS_GENERATED_TOTAL.labels(init_method=init_method).inc()


def metrics_payload() -> tuple[bytes, str]:
    """Return Prometheus exposition payload and content type."""

    return generate_latest(), CONTENT_TYPE_LATEST
