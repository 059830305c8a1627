import logging
from typing import Any, Dict, List, Optional

import httpx

from config import Settings
from models import Practice
from prompts import (
    COMPLEMENTARY_PRACTICE_PROMPT,
    FALLBACK_SUGGESTION,
    FOUNDATIONAL_PRACTICE_PROMPT,
)

logger = logging.getLogger(__name__)


def describe_practice(practice: Practice) -> str:
    return f"{practice.name} ({practice.category.value}, {practice.frequency.value})"


def build_prompt(practices: List[Practice]) -> str:
    """Condition on the current Rule of Life, or ask for a starting point when it's empty."""
    if not practices:
        return FOUNDATIONAL_PRACTICE_PROMPT.format()
    current = ", ".join(describe_practice(p) for p in practices)
    return COMPLEMENTARY_PRACTICE_PROMPT.format(practices=current)


def extract_text(data: Dict[str, Any]) -> str:
    """Join the text segments of a messages response, in order."""
    return "\n".join(
        block["text"] for block in data["content"] if block.get("type") == "text"
    )


class SuggestionClient:
    """
    Asks the text-generation service for one practice to add.

    Only one request may be in flight; while `busy` is set further calls
    are ignored. There is no timeout unless SUGGESTION_TIMEOUT_SECONDS is set.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.http_client = http_client
        self.busy = False
        self.last_suggestion: Optional[str] = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.SUGGESTION_API_KEY:
            headers["x-api-key"] = self.settings.SUGGESTION_API_KEY
            headers["anthropic-version"] = self.settings.SUGGESTION_API_VERSION
        return headers

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.settings.SUGGESTION_MODEL,
            "max_tokens": self.settings.SUGGESTION_MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
        }

    async def _post(self, client: httpx.AsyncClient, prompt: str) -> Dict[str, Any]:
        response = await client.post(
            self.settings.SUGGESTION_API_URL,
            json=self._payload(prompt),
            headers=self._headers(),
        )
        response.raise_for_status()
        return response.json()

    async def suggest(self, practices: List[Practice]) -> Optional[str]:
        if self.busy:
            logger.info("Suggestion already in progress, ignoring request")
            return None

        self.busy = True
        try:
            prompt = build_prompt(practices)
            if self.http_client is not None:
                data = await self._post(self.http_client, prompt)
            else:
                timeout = self.settings.SUGGESTION_TIMEOUT_SECONDS
                async with httpx.AsyncClient(timeout=timeout) as client:
                    data = await self._post(client, prompt)
            suggestion = extract_text(data)
        except Exception as e:
            logger.error(f"Error getting suggestion: {str(e)}")
            suggestion = FALLBACK_SUGGESTION
        finally:
            self.busy = False

        self.last_suggestion = suggestion
        return suggestion
