"""
Configuration management for PrintDesk.

Loads environment variables from .env file and provides typed access to configuration.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Configuration class for PrintDesk."""

    APP_NAME = "PrintDesk API"
    APP_VERSION = "1.1.0"

    # API Configuration
    APP_PORT = int(os.getenv("APP_PORT", "8000"))

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    # Storage
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")

    # Firewall secret seed (only written when no secret is stored yet)
    FIREWALL_SECRET_KEY = os.getenv("FIREWALL_SECRET_KEY", "")

    @classmethod
    def validate(cls) -> bool:
        """Validate that configuration values are usable."""
        problems = []
        if cls.STORAGE_BACKEND not in ("memory", "sqlite"):
            problems.append(f"STORAGE_BACKEND={cls.STORAGE_BACKEND}")
        if cls.FIREWALL_SECRET_KEY.strip() and len(cls.FIREWALL_SECRET_KEY.strip()) < 32:
            problems.append("FIREWALL_SECRET_KEY shorter than 32 characters")

        if problems:
            raise ValueError(f"Invalid configuration: {', '.join(problems)}")

        return True
