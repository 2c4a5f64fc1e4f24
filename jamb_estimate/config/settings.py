"""JAMB Estimate configuration settings.

Loads configuration from environment variables with sensible defaults.
"""

import os
from typing import List, Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load .env file for local configuration (API hosts, session backend, etc.)
load_dotenv()


SESSION_BACKENDS = ("memory", "firestore")


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # Remote pricing service (finishing materials + calculate)
    pricing_api_base_url: str = field(
        default_factory=lambda: os.getenv("PRICING_API_BASE_URL", "http://dev.thejamb.com")
    )
    # Composite order service
    orders_api_base_url: str = field(
        default_factory=lambda: os.getenv("ORDERS_API_BASE_URL", "https://dev.thejamb.com")
    )
    http_timeout_seconds: float = field(default_factory=lambda: float(os.getenv("HTTP_TIMEOUT_SECONDS", "30")))
    pricing_max_attempts: int = field(default_factory=lambda: int(os.getenv("PRICING_MAX_ATTEMPTS", "3")))

    # Session store (shared key-value bus between flow steps)
    session_backend: str = field(default_factory=lambda: os.getenv("SESSION_BACKEND", "memory").lower())
    session_collection: str = field(default_factory=lambda: os.getenv("SESSION_COLLECTION", "estimateSessions"))
    firebase_project_id: Optional[str] = field(default_factory=lambda: os.getenv("FIREBASE_PROJECT_ID"))

    # Pricing is only offered where the remote service has rates
    supported_countries: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("SUPPORTED_COUNTRIES", "United States"))
    )

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    def validate(self) -> None:
        """Validate settings values.

        Raises:
            ValueError: If a setting is out of range or unknown.
        """
        if self.http_timeout_seconds <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be positive")
        if self.pricing_max_attempts < 1:
            raise ValueError("PRICING_MAX_ATTEMPTS must be at least 1")
        if self.session_backend not in SESSION_BACKENDS:
            raise ValueError(
                f"SESSION_BACKEND must be one of {', '.join(SESSION_BACKENDS)}, got {self.session_backend!r}"
            )

    @property
    def uses_firestore_sessions(self) -> bool:
        """Check if session state is kept in Firestore."""
        return self.session_backend == "firestore"


# Singleton settings instance
settings = Settings()
