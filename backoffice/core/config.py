import os

# Database Configuration
# Uses default credentials for local Docker Compose setup
DB_URL = os.getenv("DATABASE_URL", "postgres://user:password@db:5432/backoffice_db")

# Application Metadata
PROJECT_NAME = "Restaurant Back-Office"
VERSION = "1.0.0"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Order numbers start here the first time the counter is created
ORDER_NUMBER_SEED = int(os.getenv("ORDER_NUMBER_SEED", 1001))

# Menu analysis thresholds
LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", 10))  # servings
HIGH_STOCK_THRESHOLD = float(os.getenv("HIGH_STOCK_THRESHOLD", 50))  # stocking units
EXPIRY_WINDOW_DAYS = int(os.getenv("EXPIRY_WINDOW_DAYS", 7))
TOP_SUGGESTIONS = int(os.getenv("TOP_SUGGESTIONS", 2))  # dishes per category in the brief

# Background analysis job (simulates the scheduler/worker)
ANALYSIS_ENABLED = os.getenv("ANALYSIS_ENABLED", "true").lower() in ("1", "true", "yes")
ANALYSIS_INTERVAL_SECONDS = int(os.getenv("ANALYSIS_INTERVAL_SECONDS", 3600))
ANALYSIS_INITIAL_DELAY_SECONDS = int(os.getenv("ANALYSIS_INITIAL_DELAY_SECONDS", 0))

# Advisory service (Anthropic Messages API)
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
ADVISORY_MODEL = os.getenv("ADVISORY_MODEL", "claude-sonnet-4-20250514")
ADVISORY_MAX_TOKENS = int(os.getenv("ADVISORY_MAX_TOKENS", 512))
ADVISORY_MAX_ATTEMPTS = int(os.getenv("ADVISORY_MAX_ATTEMPTS", 3))
ADVISORY_BASE_DELAY = float(os.getenv("ADVISORY_BASE_DELAY", 1.0))  # seconds
ADVISORY_BACKOFF_MULTIPLIER = float(os.getenv("ADVISORY_BACKOFF_MULTIPLIER", 2.0))
