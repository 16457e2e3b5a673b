import json
import re
from typing import Any, Dict, Optional

from querypilot.app.agents.llm import LLMClient

PROMPT_SYS = """You are an expert SQL query generator. Convert the user's question into a valid {database} SQL query.
Rules:
- Return ONLY the SQL query, no explanation, no markdown fences.
- Do not include semicolons at the end.
- Use proper {database} syntax and only the provided schema.
- If the question is ambiguous, make reasonable assumptions.
"""

_FENCE_OPEN = re.compile(r"```[A-Za-z]*[ \t]*\n?")
_TRAILING_SEMIS = re.compile(r";+\s*$")


def _mk_user_prompt(question: str, schema_hint: Optional[Dict[str, Any]]) -> str:
    parts = []
    if schema_hint:
        parts += ["Database Schema:", json.dumps(schema_hint, indent=2, default=str), ""]
    parts += ["Question:", question, "", "SQL Query:"]
    return "\n".join(parts)


def extract_sql(text: str) -> str:
    # remove ``` / ```sql markers, then any trailing semicolons
    sql = _FENCE_OPEN.sub("", text.strip())
    sql = sql.replace("```", "")
    sql = _TRAILING_SEMIS.sub("", sql.strip())
    return sql.strip()


class SqlGenerator:
    def __init__(self, llm: Optional[LLMClient] = None):
        self.llm = llm or LLMClient()

    def generate_sql(
        self,
        question: str,
        database: str,
        schema_hint: Optional[Dict[str, Any]] = None,
    ) -> str:
        out = self.llm.chat(
            [
                {"role": "system", "content": PROMPT_SYS.format(database=database)},
                {"role": "user", "content": _mk_user_prompt(question, schema_hint)},
            ],
            n=1,
        )[0]
        return extract_sql(out)
