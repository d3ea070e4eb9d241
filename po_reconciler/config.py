"""
Configuration for the invoice / purchase-order reconciler.
"""

# Load environment variables FIRST
from dotenv import load_dotenv
load_dotenv()

import os
from typing import Optional


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Base configuration."""

    # LLM Configuration (invoice extraction)
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "gemini")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "gemini-1.5-flash")
    LLM_FALLBACK_MODEL: str = os.getenv("LLM_FALLBACK_MODEL", "gemini-1.5-pro")
    LLM_MOCK_MODE: bool = _env_bool("LLM_MOCK_MODE", "false")  # Mock mode for testing
    LLM_API_KEY: str = os.getenv("LLM_API_KEY", "")
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", os.getenv("LLM_API_KEY", ""))
    LLM_API_BASE: Optional[str] = os.getenv("LLM_API_BASE", None)
    LLM_TEMPERATURE: float = 0.0  # Extraction must be deterministic
    LLM_MAX_TOKENS: int = 2048

    # Matching defaults
    QUANTITY_TOLERANCE: float = float(os.getenv("QUANTITY_TOLERANCE", "0.01"))
    PRICE_TOLERANCE: float = float(os.getenv("PRICE_TOLERANCE", "0.01"))
    MIN_KEYWORD_MATCHES: int = int(os.getenv("MIN_KEYWORD_MATCHES", "3"))
    REQUIRE_DATE_MATCH: bool = _env_bool("REQUIRE_DATE_MATCH", "true")

    # Purchase-order ledger
    PO_DATA_URL: str = os.getenv("PO_DATA_URL", "")
    PO_DATABASE_PATH: str = os.getenv(
        "PO_DATABASE_PATH",
        os.path.join(os.path.dirname(__file__), "data", "purchase_orders.json"),
    )
    PO_FETCH_TIMEOUT: float = float(os.getenv("PO_FETCH_TIMEOUT", "30"))

    # Uploads
    MAX_UPLOAD_SIZE_MB: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: str = os.getenv("LOG_FILE", "po_reconciler.log")

    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    API_DEBUG: bool = _env_bool("API_DEBUG", "false")

    # Workflow Configuration
    GRAPH_RECURSION_LIMIT: int = 25

    @classmethod
    def validate(cls) -> None:
        """Validate configuration."""
        if cls.LLM_PROVIDER not in ["openai", "gemini", "mock"]:
            raise ValueError(f"Invalid LLM_PROVIDER: {cls.LLM_PROVIDER}")

        if cls.QUANTITY_TOLERANCE < 0 or cls.PRICE_TOLERANCE < 0:
            raise ValueError("QUANTITY_TOLERANCE and PRICE_TOLERANCE must be non-negative")

        if cls.MIN_KEYWORD_MATCHES < 0:
            raise ValueError("MIN_KEYWORD_MATCHES must be non-negative")

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024


class DevelopmentConfig(Config):
    """Development configuration."""
    LOG_LEVEL = "DEBUG"
    API_DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    LOG_LEVEL = "INFO"
    API_DEBUG = False


class TestConfig(Config):
    """Test configuration."""
    LOG_LEVEL = "DEBUG"
    LLM_MOCK_MODE = True


def get_config(env: str = None) -> Config:
    """Get configuration based on environment."""
    if env is None:
        env = os.getenv("ENV", "development").lower()

    if env == "production":
        config = ProductionConfig()
    elif env == "test":
        config = TestConfig()
    else:
        config = DevelopmentConfig()

    # Validate configuration on creation
    config.validate()
    return config
