# app/llm.py

import logging

import httpx

from .config import Settings
from .errors import GatewayError

logger = logging.getLogger(__name__)


class ModelGateway:
    """
    Thin client for an OpenAI-compatible /chat/completions endpoint.
    Fixed sampling settings, one round trip per call, no retries.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.url = settings.llm_base_url.rstrip("/") + "/chat/completions"
        self._transport = transport

    async def chat(self, messages: list[dict]) -> str | None:
        """
        Returns the content of the first choice, or None when the reply has
        no choices or empty content. Transport and HTTP failures raise GatewayError.
        """
        s = self.settings
        payload = {
            "model": s.llm_model,
            "messages": messages,
            "temperature": s.llm_temperature,
            "top_p": s.llm_top_p,
            "max_tokens": s.llm_max_tokens,
        }
        headers = {"Authorization": f"Bearer {s.llm_api_token}"}
        try:
            async with httpx.AsyncClient(timeout=s.llm_timeout, transport=self._transport) as client:
                resp = await client.post(self.url, json=payload, headers=headers)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            logger.error("LLM request failed: %s", e)
            raise GatewayError(detail=str(e)) from e
        except ValueError as e:
            logger.error("LLM returned a non-JSON body: %s", e)
            raise GatewayError(detail=f"non-JSON reply: {e}") from e

        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            return None
        content = (choices[0].get("message") or {}).get("content")
        if not content or not content.strip():
            return None
        return content.strip()
