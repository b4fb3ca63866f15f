"""
Orchestrator Layer for Companion Service

This module orchestrates one analyze request:
1. Validate request
2. Classify the text emotion
3. Fuse it with the vision emotion
4. Generate the empathetic response
5. Return response
"""

import os
import logging
from datetime import datetime
from dotenv import load_dotenv

from fusion.models import AnalyzeEmotionRequest, AnalyzeEmotionResponse
from fusion.model_clients import EmotionClassifierClient, ResponseGeneratorClient, build_chat_client
from fusion.fusion_logic import fuse_emotions
from utils.errors import ConfigurationError, InputValidationError

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "AI_GATEWAY_API_KEY"


def validate_analyze_request(request: AnalyzeEmotionRequest) -> str:
    """
    Validate an analyze request.

    Returns:
        The text, unchanged

    Raises:
        InputValidationError: If text is empty or whitespace-only
    """
    if not request.text or not request.text.strip():
        raise InputValidationError("Text cannot be empty")
    return request.text


class EmotionAnalysisService:
    """Classification, fusion and response generation for one utterance."""

    def __init__(self, classifier: EmotionClassifierClient, generator: ResponseGeneratorClient):
        self.classifier = classifier
        self.generator = generator

    async def analyze(self, request: AnalyzeEmotionRequest) -> AnalyzeEmotionResponse:
        """
        Process an analyze request.

        Args:
            request: AnalyzeEmotionRequest with text and optional vision emotion

        Returns:
            AnalyzeEmotionResponse with text emotion, final emotion and reply

        Raises:
            InputValidationError: If text is empty
            ClassificationServiceError: If classification fails
            ResponseGenerationError: If response generation fails
        """
        text = validate_analyze_request(request)
        vision_emotion = request.vision_emotion
        start_time = datetime.now()

        logger.info(f"Analyzing text ({len(text)} chars), vision emotion: "
                    f"{vision_emotion.value if vision_emotion else 'none'}")

        # Step 1: Classify text emotion
        step_start = datetime.now()
        text_emotion = await self.classifier.classify(text)
        logger.info(f"[Step 1] Text emotion: {text_emotion.value} "
                    f"({(datetime.now() - step_start).total_seconds():.2f}s)")

        # Step 2: Fuse with vision emotion
        final_emotion = fuse_emotions(vision_emotion, text_emotion)
        logger.info(f"[Step 2] Final emotion: {final_emotion.value}")

        # Step 3: Generate empathetic response
        step_start = datetime.now()
        reply = await self.generator.generate(final_emotion, text)
        logger.info(f"[Step 3] Generated response ({len(reply)} chars, "
                    f"{(datetime.now() - step_start).total_seconds():.2f}s)")

        total_duration = (datetime.now() - start_time).total_seconds()
        logger.info(f"Analysis complete in {total_duration:.2f}s")

        return AnalyzeEmotionResponse(
            text_emotion=text_emotion,
            final_emotion=final_emotion,
            empathetic_response=reply
        )


def get_analysis_service() -> EmotionAnalysisService:
    """
    Build the analysis service from configuration and environment.

    Raises:
        ConfigurationError: If AI_GATEWAY_API_KEY is not set
    """
    api_key = os.getenv(API_KEY_ENV_VAR)
    if not api_key:
        logger.error(f"{API_KEY_ENV_VAR} is not configured")
        raise ConfigurationError(f"{API_KEY_ENV_VAR} is not configured")

    llm = build_chat_client(api_key)
    return EmotionAnalysisService(
        classifier=EmotionClassifierClient(llm),
        generator=ResponseGeneratorClient(llm)
    )
