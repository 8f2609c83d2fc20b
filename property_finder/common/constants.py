"""Application constants."""

USER_AGENT = "MelbournePropertyFinder/1.0 (data sync)"
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
STAGES = (
    "extract-report",
    "stubs",
    "merge",
    "geocode",
    "prices",
)
OPTIONAL_STAGES = ("reiv-suburbs",)
LOOKUPS = ("listing", "transit", "stops", "price")
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "suburb",
    "source",
    "event",
    "status",
    "attempt",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
OVERPASS_URL = "https://overpass-api.de/api/interpreter"
OSRM_ROUTE_URL = "https://router.project-osrm.org/route/v1/driving"
REIV_SUBURB_URL = "https://reiv.com.au/market-insights/suburb/{slug}"
REIV_ALL_SUBURBS_URL = "https://reiv.com.au/market-insights/all-suburbs"

STATE_CODES = ("nsw", "vic", "qld", "sa", "wa", "tas", "nt", "act")
