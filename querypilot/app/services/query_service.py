from typing import Any, Dict, Optional

from loguru import logger

from querypilot.app.agents.llm import LLMError
from querypilot.app.agents.sqlgen import SqlGenerator
from querypilot.app.connectors.base import BaseConnector
from querypilot.app.connectors.manager import ConnectionManager
from querypilot.app.core.errors import (
    ExecutionFailure,
    GenerationFailure,
    InputError,
    PolicyViolation,
)
from querypilot.app.core.settings import settings
from querypilot.app.services.confirmation import ConversationRegistry
from querypilot.app.services.results import normalize
from querypilot.app.validators.classifier import classify
from querypilot.app.validators.formatting import format_sql
from querypilot.app.validators.policy import MULTIPLE_STATEMENTS, evaluate


class QueryService:
    """
    Question -> SQL -> classify -> policy -> execute or hold for confirmation.

    Confirmed queries come back through ``execute_confirmed`` and are run
    without another policy check; only the single-statement guard applies.
    """

    def __init__(
        self,
        connections: ConnectionManager,
        generator: SqlGenerator,
        conversations: Optional[ConversationRegistry] = None,
    ):
        self.connections = connections
        self.generator = generator
        self.conversations = conversations or ConversationRegistry()

    def _connector(self, database: str) -> BaseConnector:
        connector = self.connections.get(database)
        if connector is None:
            raise InputError(f"Not connected to {database} database")
        return connector

    def _run(self, connector: BaseConnector, sql: str) -> Dict[str, Any]:
        try:
            raw = connector.execute(sql)
        except Exception as e:
            logger.error("query execution failed", database=connector.KIND, error=str(e)[:200])
            raise ExecutionFailure(str(e)) from e
        return normalize(raw, sql, connector).to_response()

    def ask(
        self,
        question: str,
        database: str,
        schema_hint: Optional[Dict[str, Any]] = None,
        mode: Optional[str] = None,
        conversation_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not question or not database:
            raise InputError("Question and database are required")
        connector = self._connector(database)

        try:
            sql = self.generator.generate_sql(question, database, schema_hint)
        except LLMError as e:
            raise GenerationFailure(str(e)) from e

        stmt = classify(sql)
        verdict = evaluate(stmt, mode or settings.DEFAULT_QUERY_MODE)
        logger.info(
            "query classified",
            database=database,
            mode=mode or settings.DEFAULT_QUERY_MODE,
            category=stmt.category.value,
            query_type=stmt.query_type,
            valid=verdict.valid,
        )
        if not verdict.valid:
            raise PolicyViolation(verdict.errors or [])

        if verdict.requires_confirmation:
            if conversation_id:
                self.conversations.get(conversation_id).propose(verdict, sql, database)
            logger.info("query awaiting confirmation", database=database, query_type=verdict.query_type)
            # raw text so the client can send it back unchanged
            return {
                "sql": sql,
                "formattedSql": format_sql(sql, connector.DIALECT),
                "results": [],
                "rowCount": 0,
                "requiresConfirmation": True,
                "queryType": verdict.query_type,
            }

        return self._run(connector, sql)

    def execute_confirmed(
        self, sql: str, database: str, conversation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        if not sql or not database:
            raise InputError("SQL query and database are required")
        if classify(sql).statement_count > 1:
            raise PolicyViolation([MULTIPLE_STATEMENTS])
        connector = self._connector(database)
        machine = self.conversations.get(conversation_id) if conversation_id else None
        if machine is not None:
            machine.verify(sql, database)
        logger.info("executing confirmed query", database=database)
        # a failed execution leaves the query pending so it can be retried
        out = self._run(connector, sql)
        if machine is not None:
            machine.accept(sql, database)
        return out

    def cancel(self, conversation_id: str) -> Dict[str, Any]:
        if not conversation_id:
            raise InputError("conversation_id is required")
        notice = self.conversations.get(conversation_id).cancel()
        logger.info("pending query cancelled", conversation_id=conversation_id)
        return {"cancelled": True, "message": notice}

    def validate(self, sql: str, database: str, mode: Optional[str] = None) -> Dict[str, Any]:
        if not sql or not database:
            raise InputError("SQL query and database are required")
        verdict = evaluate(classify(sql), mode or settings.DEFAULT_QUERY_MODE)
        out: Dict[str, Any] = {"valid": verdict.valid}
        if verdict.errors:
            out["errors"] = verdict.errors
        return out
