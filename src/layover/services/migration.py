"""Apply the itinerary schema with Alembic. Called by the migrate Lambda and scripts/migrate_local.py."""

import contextlib
import io
import json
import logging
import os
from collections.abc import Iterator

import boto3
from alembic.config import Config

from alembic import command

logger = logging.getLogger(__name__)

# Lambda bundles alembic.ini and alembic/ at the task root.
DEFAULT_ALEMBIC_DIR = "/var/task"

# RDS secret key -> env var read by alembic/env.py. A None fallback keeps the current env value.
_SECRET_ENV = {
    "username": ("AURORA_USER", "layover"),
    "password": ("AURORA_PASSWORD", ""),
    "host": ("AURORA_HOST", None),
    "port": ("AURORA_PORT", "5432"),
    "dbname": ("AURORA_DATABASE", None),
}


def _load_credentials_from_secret(secret_arn: str) -> None:
    sm = boto3.client("secretsmanager", region_name=os.environ.get("AWS_REGION", "us-east-1"))
    secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
    for key, (env_var, fallback) in _SECRET_ENV.items():
        if key in secret:
            os.environ[env_var] = str(secret[key])
        elif fallback is not None:
            os.environ[env_var] = fallback


@contextlib.contextmanager
def _captured_alembic_log() -> Iterator[io.StringIO]:
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    alembic_logger = logging.getLogger("alembic")
    alembic_logger.addHandler(handler)
    try:
        yield buf
    finally:
        alembic_logger.removeHandler(handler)


def run_migrations(revision: str = "head") -> dict[str, str]:
    """Upgrade the database to ``revision``; returns the status and Alembic's log output."""
    secret_arn = os.environ.get("AURORA_SECRET_ARN")
    if secret_arn:
        _load_credentials_from_secret(secret_arn)

    root = os.environ.get("ALEMBIC_DIR", DEFAULT_ALEMBIC_DIR)
    cfg = Config(os.path.join(root, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(root, "alembic"))

    with _captured_alembic_log() as log:
        try:
            command.upgrade(cfg, revision)
        except Exception as e:
            logger.error("Migration to %s failed: %s", revision, e)
            raise
    output = log.getvalue()
    logger.info("Migrated to %s", revision)
    return {"status": "success", "revision": revision, "output": output}
