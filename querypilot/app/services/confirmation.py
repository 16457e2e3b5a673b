"""
Pending-confirmation tracking for mutating queries.

A conversation holds at most one pending query. It moves
NONE -> PENDING -> EXECUTED | CANCELLED and then back to NONE; there is no
expiry. Clients that keep conversation state themselves never touch this
module: they resend the exact SQL to the execute endpoint.
"""

import threading
from enum import Enum
from typing import Dict, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict

from querypilot.app.core.errors import ConfirmationError
from querypilot.app.validators.policy import ValidationVerdict

CANCELLED_NOTICE = "Query cancelled. No changes were made."


class ConfirmationState(str, Enum):
    NONE = "none"
    PENDING = "pending"
    EXECUTED = "executed"
    CANCELLED = "cancelled"


class PendingQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    sql: str
    database: str
    query_type: str


class ConfirmationStateMachine:
    def __init__(self) -> None:
        self.state = ConfirmationState.NONE
        self.pending: Optional[PendingQuery] = None

    def propose(self, verdict: ValidationVerdict, sql: str, database: str) -> PendingQuery:
        if not verdict.requires_confirmation:
            raise ConfirmationError("Query does not require confirmation")
        if self.pending is not None:
            logger.info("pending query superseded", query_type=self.pending.query_type)
        self.pending = PendingQuery(sql=sql, database=database, query_type=verdict.query_type)
        self.state = ConfirmationState.PENDING
        return self.pending

    def verify(self, sql: str, database: str) -> PendingQuery:
        """Check ``sql``/``database`` against the pending query; the state is left as is."""
        pending = self._require_pending()
        if sql != pending.sql or database != pending.database:
            raise ConfirmationError("Confirmed query does not match the pending query")
        return pending

    def accept(self, sql: str, database: str) -> PendingQuery:
        pending = self.verify(sql, database)
        self._finish(ConfirmationState.EXECUTED)
        return pending

    def cancel(self) -> str:
        self._require_pending()
        self._finish(ConfirmationState.CANCELLED)
        return CANCELLED_NOTICE

    def reset(self) -> None:
        self.pending = None
        self.state = ConfirmationState.NONE

    def _require_pending(self) -> PendingQuery:
        if self.state is not ConfirmationState.PENDING or self.pending is None:
            raise ConfirmationError("No query is awaiting confirmation")
        return self.pending

    def _finish(self, outcome: ConfirmationState) -> None:
        self.state = outcome
        logger.debug("confirmation finished", outcome=outcome.value)
        self.reset()


class ConversationRegistry:
    """In-process conversation_id -> state machine map."""

    def __init__(self) -> None:
        self._items: Dict[str, ConfirmationStateMachine] = {}
        self._lock = threading.Lock()

    def get(self, conversation_id: str) -> ConfirmationStateMachine:
        with self._lock:
            machine = self._items.get(conversation_id)
            if machine is None:
                machine = self._items[conversation_id] = ConfirmationStateMachine()
            return machine

    def discard(self, conversation_id: str) -> None:
        with self._lock:
            self._items.pop(conversation_id, None)
