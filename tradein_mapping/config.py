"""Application configuration."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from tradein_mapping.builder.payload_builder import PayloadDefaults

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class PayloadConfig:
    """Fallback values for product payloads."""

    vendor: str = "Card Shop"
    product_type: str = "Trading Card"

    @classmethod
    def from_env(cls) -> "PayloadConfig":
        """Load config from environment variables."""
        return cls(
            vendor=os.getenv("MAPPING_DEFAULT_VENDOR", "Card Shop"),
            product_type=os.getenv("MAPPING_DEFAULT_PRODUCT_TYPE", "Trading Card"),
        )

    def to_defaults(self) -> PayloadDefaults:
        """Payload builder defaults."""
        return PayloadDefaults(vendor=self.vendor, product_type=self.product_type)


@dataclass
class AppConfig:
    """Application configuration."""

    store_path: str = "./config/field_mappings.json"
    output_dir: str = "./output"
    log_level: str = "WARNING"
    payload: Optional[PayloadConfig] = None

    def __post_init__(self):
        """Initialize defaults."""
        if self.payload is None:
            self.payload = PayloadConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            store_path=os.getenv("MAPPING_STORE_PATH", "./config/field_mappings.json"),
            output_dir=os.getenv("MAPPING_OUTPUT_DIR", "./output"),
            log_level=os.getenv("MAPPING_LOG_LEVEL", "WARNING"),
            payload=PayloadConfig.from_env(),
        )


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), format=LOG_FORMAT)


# Global instance
app_config = AppConfig.from_env()
