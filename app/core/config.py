import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()

class Config(BaseModel):
    app_name: str = "Leave Ledger"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    request_id_header: str = "X-Request-ID"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./leave_ledger.db")

    # Leave catalog; None means the built-in default catalog
    leave_catalog_path: Optional[str] = os.getenv("LEAVE_CATALOG_PATH") or None

    # Identity of the caller when no X-Employee-ID header is sent
    employee_id_header: str = "X-Employee-ID"
    default_employee_id: str = os.getenv("DEFAULT_EMPLOYEE_ID", "EMP001")

    # CORS — comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:5173,"
                "http://127.0.0.1:3000,http://127.0.0.1:5173",
            ).split(",")
            if o.strip()
        ]
    )

    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))

    # Feature Flags
    seed_demo_data: bool = os.getenv("SEED_DEMO_DATA", "false").lower() == "true"

settings = Config()

_logger = logging.getLogger(__name__)
if settings.environment != "development" and settings.seed_demo_data:
    _logger.warning("⚠ SEED_DEMO_DATA is enabled outside development.")
