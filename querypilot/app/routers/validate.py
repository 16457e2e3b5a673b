from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from querypilot.app.dependencies import get_query_service
from querypilot.app.services.query_service import QueryService

router = APIRouter()


class ValidateRequest(BaseModel):
    sql: str = ""
    database: str = ""
    mode: Optional[str] = None


@router.post("/validate")
def validate(req: ValidateRequest, svc: QueryService = Depends(get_query_service)):
    return svc.validate(req.sql, req.database, mode=req.mode)
