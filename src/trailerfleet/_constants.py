"""Internal constants shared across the library."""

DEFAULT_BASE_URL = "http://localhost:3001"
API_PREFIX = "/api"
USER_AGENT = "trailerfleet"

# ------------------------------------------------------------------
# Battery thresholds (state of charge, percent)
# ------------------------------------------------------------------

SOC_ALARM_BELOW = 20.0
SOC_WARNING_BELOW = 40.0

# ------------------------------------------------------------------
# Cellular signal (RSRP, dBm)
# ------------------------------------------------------------------

WEAK_SIGNAL_RSRP_BELOW = -100.0

# ------------------------------------------------------------------
# Analytics ranges and comparison charts
# ------------------------------------------------------------------

VALID_ANALYTICS_DAYS: tuple[int, ...] = (7, 30, 90)
MAX_COMPARISON_SERIES = 4
MIN_COMPARISON_SERIES = 2
COMPARISON_COLORS: tuple[str, ...] = ("#3498db", "#2ecc71", "#f39c12", "#e74c3c")

# ------------------------------------------------------------------
# Action queue
# ------------------------------------------------------------------

ACTION_QUEUE_LIMIT = 10

# Rendered in place of a value when there is no underlying data.
NO_DATA = "--"


def validate_days(days: int) -> int:
    """Return *days* if it is a supported analytics range.

    Raises :class:`ValueError` for anything other than 7, 30 or 90.
    """
    if days not in VALID_ANALYTICS_DAYS:
        raise ValueError(f"days must be one of {VALID_ANALYTICS_DAYS}, got {days}")
    return days
