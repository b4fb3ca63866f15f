import logging
import httpx
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class ChatCompletionClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://ai.gateway.lovable.dev",
        model: str = "google/gemini-2.5-flash",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize chat completion client for an OpenAI-compatible gateway.

        Args:
            api_key: Gateway API key
            base_url: Base URL for API (default: https://ai.gateway.lovable.dev)
            model: Model name (default: google/gemini-2.5-flash)
            timeout: Read timeout in seconds (default: 30.0)
            transport: Optional httpx transport (used to stub the gateway in tests)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    async def chat(self, messages: List[Dict[str, str]], **kwargs) -> str:
        """
        Non-streaming chat completion. Returns the content of the first choice.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
            KeyError, IndexError, ValueError: If the body is not a chat completion
        """
        payload = {
            "model": self.model,
            "messages": messages
        }
        if kwargs:
            payload.update(kwargs)

        url = f"{self.base_url}/v1/chat/completions"
        timeout_config = httpx.Timeout(
            connect=10.0,
            read=self.timeout,
            write=10.0,
            pool=10.0
        )
        async with httpx.AsyncClient(timeout=timeout_config, transport=self.transport) as client:
            resp = await client.post(url, headers=self._headers(), json=payload)
            if resp.is_error:
                logger.error(f"Gateway returned HTTP {resp.status_code}: {resp.text}")
            resp.raise_for_status()
            data = resp.json()
            message = data["choices"][0]["message"]
            content = message.get("content") or ""
            if not isinstance(content, str):
                raise ValueError(f"Expected string message content, got {type(content).__name__}")
            return content
