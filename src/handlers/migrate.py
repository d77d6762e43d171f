"""Migration handler: applies Alembic migrations to the Aurora itinerary tables."""

from typing import Any

from layover.services.migration import run_migrations


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    result = run_migrations((event or {}).get("revision", "head"))
    return {"statusCode": 200, "body": result["output"]}
