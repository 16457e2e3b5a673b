from typing import Any, Dict, List, Optional, cast

from querypilot.app.core.settings import settings


class LLMError(RuntimeError):
    pass


class LLMClient:
    def __init__(self):
        self.provider = settings.LLM_PROVIDER
        self.model = settings.LLM_MODEL
        self.api_key = settings.LLM_API_KEY
        self.temperature = settings.LLM_TEMPERATURE

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def chat(
        self,
        messages: List[Dict[str, str]],
        n: int = 1,
        stop: Optional[List[str]] = None,
    ) -> List[str]:
        if not self.api_key:
            raise LLMError("LLM_API_KEY is not configured")
        if self.provider != "openai":
            raise LLMError(f"Unsupported provider {self.provider}")

        from openai import OpenAI

        client = OpenAI(api_key=self.api_key)
        try:
            resp = client.chat.completions.create(  # type: ignore[arg-type]
                model=self.model,
                messages=cast(Any, messages),
                n=n,
                stop=stop,
                temperature=self.temperature,
            )
        except Exception as e:
            raise LLMError(f"{type(e).__name__}: {e}") from e
        return [c.message.content or "" for c in resp.choices]
