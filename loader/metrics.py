from prometheus_client import Counter, Gauge, Histogram


HTTP_REQUESTS = Counter(
    "serverloader_http_requests_total",
    "HTTP requests handled",
    ["host", "method", "path", "status"],
)
HTTP_LATENCY = Histogram(
    "serverloader_http_request_duration_seconds",
    "Request latency in seconds",
    ["host", "path"],
)
LEDGER_ITEMS = Gauge(
    "serverloader_ledger_items",
    "Workload results currently held in memory",
)
LEDGER_RECLAIMS = Counter(
    "serverloader_ledger_reclaims_total",
    "Times the ledger was cleared by the working-set threshold",
)
