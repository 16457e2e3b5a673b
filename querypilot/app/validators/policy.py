from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from querypilot.app.validators.classifier import (
    READ_PREFIXES,
    QueryCategory,
    SqlStatement,
)

EMPTY_SQL = "SQL query cannot be empty"
MULTIPLE_STATEMENTS = "Multiple statements are not allowed"
INVALID_MODE = "Invalid query mode specified"
MUST_START_WITH = "Query must start with one of: " + ", ".join(READ_PREFIXES)


class SafetyMode(str, Enum):
    READ_ONLY = "read-only"
    SAFE = "safe"
    FULL_ACCESS = "full-access"


class ValidationVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: Optional[List[str]] = None
    requires_confirmation: bool = False
    query_type: str = "unknown"


def _resolve_mode(mode: Union[SafetyMode, str, None]) -> Optional[SafetyMode]:
    if isinstance(mode, SafetyMode):
        return mode
    try:
        return SafetyMode(mode)
    except ValueError:
        return None


def _read_only_errors(stmt: SqlStatement) -> List[str]:
    errors = []
    if stmt.is_mutation:
        errors.append(
            "Operation not allowed in READ-ONLY mode: "
            f"{stmt.query_type.upper()} statements cannot be executed"
        )
    if stmt.category != QueryCategory.SELECT:
        errors.append(MUST_START_WITH)
    return errors


def evaluate(stmt: SqlStatement, mode: Union[SafetyMode, str, None]) -> ValidationVerdict:
    """
    Decide whether a classified statement may run under ``mode``.

    Only the classifier's abstract output is consulted (category, statement
    count, query type), never the raw text.
    """
    if stmt.is_empty:
        return ValidationVerdict(valid=False, errors=[EMPTY_SQL], query_type=stmt.query_type)

    errors: List[str] = []
    resolved = _resolve_mode(mode)
    if resolved is None:
        errors.append(INVALID_MODE)

    if stmt.statement_count > 1:
        errors.append(MULTIPLE_STATEMENTS)

    needs_confirmation = False
    if resolved is SafetyMode.READ_ONLY:
        errors.extend(_read_only_errors(stmt))
    elif resolved is SafetyMode.SAFE:
        # unknown statements pass without confirmation in safe mode
        needs_confirmation = stmt.is_mutation

    if errors:
        return ValidationVerdict(valid=False, errors=errors, query_type=stmt.query_type)
    if needs_confirmation:
        return ValidationVerdict(
            valid=True, requires_confirmation=True, query_type=stmt.query_type
        )
    return ValidationVerdict(valid=True, query_type=stmt.query_type)
