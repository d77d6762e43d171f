"""Process configuration, read once from the environment and cached.

Local development reads everything from env vars (a ``.env`` file is loaded
by the scripts and tests). Deployed Lambdas get the Clerk secret and the
Aurora credentials from Secrets Manager by ARN instead.
"""

from datetime import tzinfo
from os import environ
from typing import Literal
from zoneinfo import ZoneInfo

import boto3
from pydantic import BaseModel, ConfigDict

DEFAULT_PHOTON_URL = "https://photon.komoot.io/api/"

_clerk_secret: str | None = None


def _clerk_secret_key() -> str:
    """CLERK_SECRET_KEY if set, else the secret behind CLERK_SECRET_ARN, else ""."""
    global _clerk_secret
    if _clerk_secret is None:
        key = environ.get("CLERK_SECRET_KEY", "")
        arn = environ.get("CLERK_SECRET_ARN", "")
        if not key and arn:
            sm = boto3.client("secretsmanager")
            key = sm.get_secret_value(SecretId=arn)["SecretString"]
        if not key:
            return ""
        _clerk_secret = key
    return _clerk_secret


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    environment: str = "local"
    aws_region: str = "us-east-1"

    # Storage
    store_backend: Literal["memory", "aurora"] = "memory"
    aurora_host: str = "localhost"
    aurora_port: int = 5432
    aurora_database: str = "layover"
    aurora_user: str = "layover"
    aurora_password: str = "localdev"
    aurora_secret_arn: str | None = None

    clerk_secret_key: str = ""

    # Place lookup
    photon_url: str = DEFAULT_PHOTON_URL
    place_search_limit: int = 5
    place_search_debounce_ms: int = 300
    place_search_timeout_s: float = 10.0

    # Sharing and display
    share_base_url: str = ""
    timezone: str = "UTC"

    @property
    def zone(self) -> tzinfo:
        return ZoneInfo(self.timezone)

    @property
    def place_search_debounce_seconds(self) -> float:
        return self.place_search_debounce_ms / 1000


# Config field -> environment variable. Unset variables keep the field default.
_ENV_VARS = {
    "environment": "ENVIRONMENT",
    "aws_region": "AWS_REGION",
    "store_backend": "STORE_BACKEND",
    "aurora_host": "AURORA_HOST",
    "aurora_port": "AURORA_PORT",
    "aurora_database": "AURORA_DATABASE",
    "aurora_user": "AURORA_USER",
    "aurora_password": "AURORA_PASSWORD",
    "aurora_secret_arn": "AURORA_SECRET_ARN",
    "photon_url": "PHOTON_URL",
    "place_search_limit": "PLACE_SEARCH_LIMIT",
    "place_search_debounce_ms": "PLACE_SEARCH_DEBOUNCE_MS",
    "place_search_timeout_s": "PLACE_SEARCH_TIMEOUT_S",
    "share_base_url": "SHARE_BASE_URL",
    "timezone": "LAYOVER_TIMEZONE",
}

_config: Config | None = None


def _reset_config() -> None:
    """Forget the cached config and Clerk secret. Tests only."""
    global _config, _clerk_secret
    _config = None
    _clerk_secret = None


def get_config() -> Config:
    global _config
    if _config is None:
        values: dict[str, object] = {field: environ[var] for field, var in _ENV_VARS.items() if var in environ}
        values["clerk_secret_key"] = _clerk_secret_key()
        _config = Config(**values)
    return _config
