"""
Configuration loader for the checkout client
"""

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "checkout_config.yml"

# env var -> config field
_ENV_OVERRIDES = {
    "CHECKOUT_API_BASE_URL": "api_base_url",
    "CHECKOUT_REQUEST_TIMEOUT": "request_timeout_seconds",
    "CHECKOUT_CURRENCY": "currency",
    "INTEGRATIONS_MODE": "integrations_mode",
    "REDIS_URL": "redis_url",
}


class CheckoutConfig(BaseModel):
    """Checkout client configuration"""

    api_base_url: str = ""
    payment_endpoint: str = "/payments/create-payment/"
    token_key: str = "access_token"
    cart_key: str = "cart"
    currency: str = Field(default="KES", min_length=3, max_length=3)
    # None keeps the transport's own behaviour: no client-side timeout
    request_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    integrations_mode: Literal["auto", "mock", "real"] = "auto"
    redis_url: Optional[str] = None

    def use_real_integrations(self) -> bool:
        if self.integrations_mode == "real":
            return True
        if self.integrations_mode == "mock":
            return False
        return bool(self.api_base_url)


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for env_name, field_name in _ENV_OVERRIDES.items():
        value = os.getenv(env_name, "").strip()
        if value:
            overrides[field_name] = value.lower() if field_name == "integrations_mode" else value
    return overrides


def load_checkout_config(config_path: Optional[Path] = None, use_env: bool = True) -> CheckoutConfig:
    """
    Load and validate checkout configuration from a YAML file plus env vars

    Args:
        config_path: Path to config file. Defaults to config/checkout_config.yml.
            A missing default file is allowed; a missing explicit path is not.
        use_env: Apply .env / environment overrides on top of the file

    Returns:
        Validated CheckoutConfig object

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    config_data: Dict[str, Any] = {}

    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    path = config_path or DEFAULT_CONFIG_PATH
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            config_data = (yaml.safe_load(f) or {}).get("checkout", {})

    if use_env:
        load_dotenv()
        config_data.update(_env_overrides())

    try:
        config = CheckoutConfig(**config_data)
        logger.info(f"Loaded checkout config (mode={config.integrations_mode}, base_url={config.api_base_url or '-'})")
        return config
    except ValidationError as e:
        logger.error(f"Config validation failed: {e}")
        raise
