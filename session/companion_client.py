"""
Companion Client

HTTP client the companion session uses to call the analyze endpoint.
"""

import httpx
import logging
from typing import Optional

from pydantic import ValidationError

from fusion.config_loader import load_config
from fusion.models import AnalyzeEmotionRequest, AnalyzeEmotionResponse, EmotionLabel
from utils.errors import ClassificationServiceError

logger = logging.getLogger(__name__)

# Load configuration
_session_config = load_config().get("session", {})


class AnalyzeEmotionClient:
    """Client for POST /emotion/analyze."""

    def __init__(
        self,
        analyze_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize analyze client.

        Args:
            analyze_url: Optional endpoint URL override
            timeout: Optional read timeout override in seconds
            transport: Optional httpx transport (used to stub the endpoint in tests)
        """
        self.analyze_url = analyze_url or _session_config.get("analyze_url", "http://localhost:8000/emotion/analyze")
        self.timeout = timeout or _session_config.get("request_timeout_seconds", 60.0)
        self.transport = transport

        logger.info(f"AnalyzeEmotionClient initialized with URL: {self.analyze_url}")

    async def analyze(self, text: str, vision_emotion: Optional[EmotionLabel]) -> AnalyzeEmotionResponse:
        """
        Send text and the latest vision emotion for analysis.

        Raises:
            ClassificationServiceError: On transport failure, non-2xx status or malformed body
        """
        payload = AnalyzeEmotionRequest(text=text, vision_emotion=vision_emotion)
        body = payload.model_dump(by_alias=True, mode="json")
        # The endpoint expects "" rather than null when there is no vision sample
        body["visionEmotion"] = body["visionEmotion"] or ""

        timeout_config = httpx.Timeout(
            connect=5.0,
            read=self.timeout,
            write=5.0,
            pool=5.0
        )

        try:
            async with httpx.AsyncClient(timeout=timeout_config, transport=self.transport) as client:
                response = await client.post(self.analyze_url, json=body)
                if response.is_error:
                    raise ClassificationServiceError(
                        f"Analyze endpoint returned HTTP {response.status_code}: {self._error_message(response)}"
                    )
                return AnalyzeEmotionResponse.model_validate(response.json())

        except httpx.TimeoutException as e:
            logger.warning(f"Analyze request timed out after {self.timeout}s")
            raise ClassificationServiceError("Analyze request timed out") from e
        except httpx.HTTPError as e:
            logger.warning(f"Analyze request failed: {e}")
            raise ClassificationServiceError(f"Analyze request failed: {e}") from e
        except (ValueError, ValidationError) as e:
            logger.warning(f"Analyze endpoint returned a malformed body: {e}")
            raise ClassificationServiceError("Analyze endpoint returned a malformed body") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json().get("error", response.text)
        except (ValueError, AttributeError):
            return response.text
