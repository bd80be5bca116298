"""
Constants for the Loki settings subsystem.
"""


# ----- Persistence -----

# File created inside the application data directory
SETTINGS_FILE_NAME = "settings.db"

# Logical key holding the serialized settings record
SETTINGS_KEY = "settings"

# Category recorded alongside the settings row
SETTINGS_CATEGORY = "app"

# Version tag written into every export
EXPORT_VERSION = "1.0.0"


# ----- Environment -----

DATA_DIR_ENV_VAR = "LOKI_DATA_DIR"
LOG_LEVEL_ENV_VAR = "LOKI_LOG_LEVEL"
DEFAULT_DATA_DIR_NAME = ".loki"


# ----- Providers -----

OPENAI = "openai"
ANTHROPIC = "anthropic"
GOOGLE = "google"
OLLAMA = "ollama"

DEFAULT_OLLAMA_ENDPOINT = "http://localhost:11434"


# ----- Connection checks -----

# Simulated round-trip latency in seconds
CLOUD_CHECK_LATENCY = 1.0
LOCAL_CHECK_LATENCY = 0.5


# ----- Validation bounds -----

AUTO_SAVE_INTERVAL_RANGE = (5, 300)
TEMPERATURE_RANGE = (0.0, 2.0)
MAX_TOKENS_RANGE = (1, 4000)
SIDEBAR_WIDTH_RANGE = (200, 600)
