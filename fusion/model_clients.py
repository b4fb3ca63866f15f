"""
Model Client Layer for Companion Service

This module provides clients for the two remote language-model capabilities:
text emotion classification and empathetic response generation. Both talk to
the same OpenAI-compatible AI gateway through ChatCompletionClient.
Failures are converted to ServiceError subclasses; there are no retries.
"""

import httpx
import logging
from typing import Dict, List, Optional

from fusion.config_loader import load_config
from fusion.fusion_logic import normalize_emotion_label
from fusion.models import EmotionLabel
from utils.errors import ClassificationServiceError, ResponseGenerationError, ServiceError
from utils.llm import ChatCompletionClient

logger = logging.getLogger(__name__)

# Load configuration
_config = load_config()
_gateway_config = _config.get("ai_gateway", {})

CLASSIFICATION_SYSTEM_PROMPT = (
    "You are an emotion detection AI. Analyze the text and return ONLY ONE emotion: "
    "happy, sad, angry, fear, or neutral. Respond with just the emotion word, nothing else."
)

RESPONSE_SYSTEM_PROMPT_TEMPLATE = """You are an empathetic AI companion. The user is feeling {emotion}. Generate a warm, caring response (2 sentences max) that:
1. Acknowledges their emotion with empathy
2. Offers one psychology-based or motivational suggestion

Be human-like, calming, and genuinely supportive. Use simple, warm language."""


def build_chat_client(api_key: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> ChatCompletionClient:
    """Create a ChatCompletionClient from the ai_gateway config section."""
    return ChatCompletionClient(
        api_key=api_key,
        base_url=_gateway_config.get("base_url", "https://ai.gateway.lovable.dev"),
        model=_gateway_config.get("model", "google/gemini-2.5-flash"),
        timeout=_gateway_config.get("timeout_seconds", 30.0),
        transport=transport
    )


class BaseLLMClient:
    """Base class for gateway-backed clients: sends messages, maps failures to one error type."""

    error_type = ServiceError

    def __init__(self, llm: ChatCompletionClient, service_name: str):
        self.llm = llm
        self.service_name = service_name
        logger.info(f"{service_name}Client initialized with model: {llm.model}")

    async def _complete(self, messages: List[Dict[str, str]]) -> str:
        try:
            return await self.llm.chat(messages)
        except httpx.TimeoutException as e:
            logger.warning(f"{self.service_name} request timed out after {self.llm.timeout}s")
            raise self.error_type(f"{self.service_name} request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"{self.service_name} returned HTTP {e.response.status_code}: {e}")
            raise self.error_type(f"{self.service_name} returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning(f"{self.service_name} request failed: {e}")
            raise self.error_type(f"{self.service_name} request failed: {e}") from e
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            logger.warning(f"{self.service_name} returned a malformed body: {e}")
            raise self.error_type(f"{self.service_name} returned a malformed body") from e


class EmotionClassifierClient(BaseLLMClient):
    """Client for text emotion classification."""

    error_type = ClassificationServiceError

    def __init__(self, llm: ChatCompletionClient):
        super().__init__(llm, "EmotionClassifier")

    async def classify(self, text: str) -> EmotionLabel:
        """
        Classify the emotion expressed in text.

        Args:
            text: User utterance

        Returns:
            EmotionLabel detected in the text

        Raises:
            ClassificationServiceError: If the call fails or the reply is not a known label
        """
        messages = [
            {"role": "system", "content": CLASSIFICATION_SYSTEM_PROMPT},
            {"role": "user", "content": text}
        ]
        raw = await self._complete(messages)
        label = normalize_emotion_label(raw)
        if label is None:
            logger.warning(f"{self.service_name} replied with unknown label '{raw}'")
            raise ClassificationServiceError(f"Unrecognised emotion label from classifier: '{raw.strip()}'")

        logger.debug(f"{self.service_name} raw reply '{raw.strip()}' -> {label.value}")
        return label


class ResponseGeneratorClient(BaseLLMClient):
    """Client for empathetic response generation."""

    error_type = ResponseGenerationError

    def __init__(self, llm: ChatCompletionClient):
        super().__init__(llm, "ResponseGenerator")

    async def generate(self, emotion: EmotionLabel, text: str) -> str:
        """
        Generate a short empathetic reply for the user's text, keyed on emotion.

        Raises:
            ResponseGenerationError: If the call fails or the reply is empty
        """
        messages = [
            {"role": "system", "content": RESPONSE_SYSTEM_PROMPT_TEMPLATE.format(emotion=emotion.value)},
            {"role": "user", "content": text}
        ]
        reply = (await self._complete(messages)).strip()
        if not reply:
            raise ResponseGenerationError(f"{self.service_name} returned an empty response")
        return reply
