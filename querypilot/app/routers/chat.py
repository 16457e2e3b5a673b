from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from querypilot.app.dependencies import get_query_service
from querypilot.app.services.query_service import QueryService

router = APIRouter()


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str = ""
    database: str = ""
    schema_hint: Optional[Dict[str, Any]] = Field(default=None, alias="schema")
    mode: Optional[str] = None
    conversation_id: Optional[str] = Field(default=None, alias="conversationId")


class ExecuteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sql: str = ""
    database: str = ""
    conversation_id: Optional[str] = Field(default=None, alias="conversationId")


class CancelRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(default="", alias="conversationId")


@router.post("/chat")
def chat(req: ChatRequest, svc: QueryService = Depends(get_query_service)):
    return svc.ask(
        req.question,
        req.database,
        schema_hint=req.schema_hint,
        mode=req.mode,
        conversation_id=req.conversation_id,
    )


@router.post("/chat/execute")
def execute_confirmed(req: ExecuteRequest, svc: QueryService = Depends(get_query_service)):
    # no mode here: the query was classified when it was generated
    return svc.execute_confirmed(req.sql, req.database, conversation_id=req.conversation_id)


@router.post("/chat/cancel")
def cancel(req: CancelRequest, svc: QueryService = Depends(get_query_service)):
    return svc.cancel(req.conversation_id)
