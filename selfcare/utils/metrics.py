"""Prometheus metrics for the SelfCare API."""

from prometheus_client import Counter, Histogram

from .config import get_settings
from .logging_config import MetricsLogger

metrics = MetricsLogger(get_settings().service_name)

REQUEST_COUNT = Counter(
    "selfcare_requests_total",
    "Total number of requests",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "selfcare_request_latency_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
CONTENT_GENERATIONS = Counter(
    "selfcare_content_generations_total",
    "Language-model content generations by kind and outcome",
    ["kind", "outcome"],
)
ACTIVITY_COMPLETIONS = Counter(
    "selfcare_activity_completions_total",
    "Completed activities",
)
