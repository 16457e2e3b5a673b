from typing import Any, Dict

from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import BaseModel, Field

from querypilot.app.connectors.factory import CONNECTORS, with_defaults
from querypilot.app.connectors.manager import ConnectionManager
from querypilot.app.core.errors import ConnectionFailure, InputError
from querypilot.app.dependencies import get_connections

router = APIRouter()


class ConnectRequest(BaseModel):
    type: str = ""
    credentials: Dict[str, Any] = Field(default_factory=dict)


class DisconnectRequest(BaseModel):
    type: str = ""


def _check_credentials(kind: str, creds: Dict[str, Any]) -> None:
    if kind == "sqlite":
        if not creds.get("path"):
            raise InputError("SQLite path is required")
    elif not (creds.get("host") and creds.get("database") and creds.get("user")):
        raise InputError("Host, database, and user are required for PostgreSQL/MySQL")


@router.post("/databases")
def connect(req: ConnectRequest, connections: ConnectionManager = Depends(get_connections)):
    if not req.type:
        raise InputError("Database type is required")
    if req.type not in CONNECTORS:
        raise InputError("Invalid database type")
    # settings fill in whatever the request leaves out
    creds = with_defaults(req.type, req.credentials)
    _check_credentials(req.type, creds)

    try:
        connector = connections.open(req.type, creds)
        schema = connector.describe_schema()
    except Exception as e:
        logger.error("connect failed", kind=req.type, error=str(e)[:200])
        raise ConnectionFailure(str(e) or f"Failed to connect to {req.type} database") from e

    return {
        "success": True,
        "message": f"Successfully connected to {req.type} database",
        "schema": schema,
    }


@router.post("/databases/disconnect")
def disconnect(req: DisconnectRequest, connections: ConnectionManager = Depends(get_connections)):
    if not req.type:
        raise InputError("Database type is required")
    connections.close(req.type)
    return {"success": True, "message": f"Disconnected from {req.type} database"}


@router.get("/databases/{database}/schema")
def schema(database: str, connections: ConnectionManager = Depends(get_connections)):
    connector = connections.get(database)
    if connector is None:
        raise InputError(f"Not connected to {database} database")
    return connector.describe_schema()
