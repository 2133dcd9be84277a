"""Application-wide constants. Adjust values here instead of in the modules that use them."""

from pathlib import Path

# ---------------------------------------------------------------------------
# Durable storage
# ---------------------------------------------------------------------------
STATE_SLOT = "w2w-state"
LANGUAGE_SLOT = "w2w-language"

# Slot name -> file name inside the data directory
SLOT_FILES = {
    STATE_SLOT: "w2w-state.json",
    LANGUAGE_SLOT: "w2w-language",
}

DATA_DIR_ENV_VAR = "W2W_DATA_DIR"
DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent / "data"
LOG_DIR = Path("logs")

# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------
SUPPORTED_LANGUAGES = ("en", "es")
DEFAULT_LANGUAGE = "en"

# ---------------------------------------------------------------------------
# Shifts
# ---------------------------------------------------------------------------
SHIFT_OFF = "off"
WORKING_SHIFTS = ("morning", "afternoon", "night")  # Priority order used by the generator
SHIFT_KINDS = WORKING_SHIFTS + (SHIFT_OFF,)

DAYS_IN_WEEK = 7
WEEKDAY_NAMES = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")  # Sunday=0

DATE_FORMAT = "%Y-%m-%d"

# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------
EXPORT_FILENAME_TEMPLATE = "w2w_schedule_{first_date}.{extension}"
EXPORT_SHEET_NAME = "Schedule"
EXPORT_EXTENSIONS = {
    "excel": "xlsx",
    "csv": "csv",
    "pdf": "pdf",
}
