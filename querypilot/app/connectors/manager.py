from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional

from loguru import logger

from querypilot.app.connectors.base import BaseConnector
from querypilot.app.connectors.factory import create_connector


class ConnectionManager:
    """Live connectors keyed by logical database identifier (the kind, by default)."""

    def __init__(
        self, factory: Callable[[str, Dict[str, Any]], BaseConnector] = create_connector
    ) -> None:
        self._factory = factory
        self._connections: Dict[str, BaseConnector] = {}
        self._lock = threading.Lock()

    def open(
        self, kind: str, credentials: Dict[str, Any], name: Optional[str] = None
    ) -> BaseConnector:
        key = name or kind
        connector = self._factory(kind, credentials)
        connector.connect()
        with self._lock:
            previous = self._connections.pop(key, None)
            self._connections[key] = connector
        if previous is not None:
            previous.disconnect()
        logger.info("database connected", database=key, kind=connector.KIND)
        return connector

    def register(self, name: str, connector: BaseConnector) -> None:
        with self._lock:
            self._connections[name] = connector

    def get(self, name: str) -> Optional[BaseConnector]:
        with self._lock:
            return self._connections.get(name)

    def close(self, name: str) -> bool:
        with self._lock:
            connector = self._connections.pop(name, None)
        if connector is None:
            return False
        connector.disconnect()
        logger.info("database disconnected", database=name)
        return True

    def close_all(self) -> None:
        with self._lock:
            items = list(self._connections.items())
            self._connections.clear()
        for name, connector in items:
            try:
                connector.disconnect()
            except Exception:
                logger.exception(f"disconnect failed for {name}")
