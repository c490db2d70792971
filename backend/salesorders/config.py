# =============================================================================
# SALES ORDERS v1.0 - CONFIGURATION
# =============================================================================
# Settings read from environment (and .env when present)
# =============================================================================

import os
import logging

from dotenv import load_dotenv

load_dotenv()


# =============================================================================
# MAIN CONFIGURATION
# =============================================================================

class Settings:
    """Global application settings."""

    # PostgreSQL
    PG_HOST: str = os.getenv("PG_HOST", "localhost")
    PG_PORT: int = int(os.getenv("PG_PORT", "5432"))
    PG_DATABASE: str = os.getenv("PG_DATABASE", "sales_orders")
    PG_USER: str = os.getenv("PG_USER", "sales_orders_user")
    PG_PASSWORD: str = os.getenv("PG_PASSWORD", "")

    # Pool
    PG_POOL_MIN: int = int(os.getenv("PG_POOL_MIN", "1"))
    PG_POOL_MAX: int = int(os.getenv("PG_POOL_MAX", "10"))

    # 0 = no statement timeout
    PG_STATEMENT_TIMEOUT_MS: int = int(os.getenv("PG_STATEMENT_TIMEOUT_MS", "0"))

    # Store backend: "postgresql" or "memory"
    ORDER_STORE: str = os.getenv("ORDER_STORE", "postgresql")

    # Orders
    ORDERS_PAGE_SIZE: int = int(os.getenv("ORDERS_PAGE_SIZE", "20"))

    # Statistics
    STATS_PERIOD_MONTHS: int = int(os.getenv("STATS_PERIOD_MONTHS", "12"))
    STATS_TOP_N: int = int(os.getenv("STATS_TOP_N", "5"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Version
    VERSION: str = "1.0.0"
    APP_NAME: str = "SALES_ORDERS"


# Singleton instance
config = Settings()


def configure_logging(level: str = None) -> None:
    """Basic logging setup using LOG_LEVEL unless a level is given."""
    logging.basicConfig(
        level=(level or config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
