from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)

UPSTREAM_API_COUNT = Counter(
    "upstream_api_requests_total",
    "Total number of upstream pricing API requests",
    ["source", "status"],
)

UPSTREAM_API_DURATION = Histogram(
    "upstream_api_duration_seconds",
    "Duration of upstream pricing API requests in seconds",
    ["source"],
)

CACHE_HITS = Counter("cache_hits_total", "Total number of cache hits")
CACHE_MISSES = Counter("cache_misses_total", "Total number of cache misses")
CACHE_EVICTIONS = Counter("cache_evictions_total", "Total number of whole-cache evictions")
