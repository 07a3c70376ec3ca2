import prometheus_client
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Guard against duplicated metric registration when the module is imported
# multiple times (for example, when running uvicorn with the reloader).
REQUEST_COUNT = getattr(prometheus_client, "flag_admin_REQUEST_COUNT", None)
REQUEST_LATENCY = getattr(prometheus_client, "flag_admin_REQUEST_LATENCY", None)
FLAG_FETCHES = getattr(prometheus_client, "flag_admin_FLAG_FETCHES", None)
FLAG_MUTATIONS = getattr(prometheus_client, "flag_admin_FLAG_MUTATIONS", None)
FLAG_SAVE_BATCHES = getattr(prometheus_client, "flag_admin_FLAG_SAVE_BATCHES", None)
FLAG_SAVE_DURATION = getattr(prometheus_client, "flag_admin_FLAG_SAVE_DURATION", None)

if REQUEST_COUNT is None:
    # HTTP Metrics
    REQUEST_COUNT = Counter(
        "http_requests_total", "Total HTTP requests", ["method", "endpoint", "http_status"]
    )
    REQUEST_LATENCY = Histogram(
        "http_request_latency_seconds", "HTTP request latency in seconds", ["method", "endpoint"]
    )

    # Flag administration metrics
    FLAG_FETCHES = Counter(
        "flag_fetches_total",
        "Total flag listing fetches",
        ["result"],  # result: success/failure
    )
    FLAG_MUTATIONS = Counter(
        "flag_mutations_total",
        "Total per-row flag mutation calls",
        ["operation", "result"],  # operation: create/update
    )
    FLAG_SAVE_BATCHES = Counter(
        "flag_save_batches_total", "Total flag batch saves", ["result"]
    )
    FLAG_SAVE_DURATION = Histogram(
        "flag_save_duration_seconds", "Time for a batch save to settle"
    )

    prometheus_client.flag_admin_REQUEST_COUNT = REQUEST_COUNT  # type: ignore[attr-defined]
    prometheus_client.flag_admin_REQUEST_LATENCY = REQUEST_LATENCY  # type: ignore[attr-defined]
    prometheus_client.flag_admin_FLAG_FETCHES = FLAG_FETCHES  # type: ignore[attr-defined]
    prometheus_client.flag_admin_FLAG_MUTATIONS = FLAG_MUTATIONS  # type: ignore[attr-defined]
    prometheus_client.flag_admin_FLAG_SAVE_BATCHES = FLAG_SAVE_BATCHES  # type: ignore[attr-defined]
    prometheus_client.flag_admin_FLAG_SAVE_DURATION = FLAG_SAVE_DURATION  # type: ignore[attr-defined]


def metrics_response():
    data = generate_latest()
    return data, CONTENT_TYPE_LATEST
