"""Connector factory for the supported database kinds."""

from __future__ import annotations

from typing import Any, Dict, Type

from querypilot.app.connectors.base import BaseConnector
from querypilot.app.connectors.mysql import MySQLConnector
from querypilot.app.connectors.postgres import PostgresConnector
from querypilot.app.connectors.sqlite import SQLiteConnector
from querypilot.app.core.settings import settings

CONNECTORS: Dict[str, Type[BaseConnector]] = {
    "postgresql": PostgresConnector,
    "mysql": MySQLConnector,
    "sqlite": SQLiteConnector,
}


def resolve_kind(kind: str) -> str:
    value = (kind or "").strip().lower()
    if value == "postgres":
        value = "postgresql"
    if value not in CONNECTORS:
        raise ValueError(f"Unsupported database type: {kind}")
    return value


def with_defaults(kind: str, credentials: Dict[str, Any]) -> Dict[str, Any]:
    if kind == "sqlite":
        defaults: Dict[str, Any] = {"path": settings.SQLITE_PATH}
    elif kind == "postgresql":
        defaults = {
            "host": settings.POSTGRES_HOST,
            "port": settings.POSTGRES_PORT,
            "database": settings.POSTGRES_DB,
            "user": settings.POSTGRES_USER,
            "password": settings.POSTGRES_PASSWORD,
        }
    else:
        defaults = {
            "host": settings.MYSQL_HOST,
            "port": settings.MYSQL_PORT,
            "database": settings.MYSQL_DB,
            "user": settings.MYSQL_USER,
            "password": settings.MYSQL_PASSWORD,
        }
    merged = dict(defaults)
    merged.update({k: v for k, v in credentials.items() if v not in (None, "")})
    return merged


def create_connector(kind: str, credentials: Dict[str, Any]) -> BaseConnector:
    """Build an unconnected connector for ``kind`` (postgresql, mysql, sqlite)."""
    target = resolve_kind(kind)
    return CONNECTORS[target](with_defaults(target, credentials))
