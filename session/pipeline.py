"""
Companion Session Pipeline

Runs one submission at a time through the analyze endpoint:
1. Validate text (empty input is ignored)
2. Snapshot the latest vision emotion
3. Request classification + response from the analyze endpoint
4. Recompute the final emotion with the shared fusion rule
5. Update the current turn, append history, notify listeners

Submissions made while one is in flight queue behind it.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional

from fusion.fusion_logic import fuse_emotions
from fusion.models import ConversationTurn, EmotionLabel
from session.companion_client import AnalyzeEmotionClient
from session.history import SessionHistory
from session.notifications import Notifier
from session.speech import SpeechInput
from session.vision import VisionSignalSource
from utils.errors import CapabilityUnavailable, ServiceError

logger = logging.getLogger(__name__)

ANALYZING_MESSAGE = "Analyzing your emotions..."
SUCCESS_MESSAGE = "Analysis complete"
FAILURE_MESSAGE = "Failed to analyze emotions. Please try again."


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_CLASSIFICATION = "awaiting_classification"
    AWAITING_RESPONSE = "awaiting_response"
    COMPLETE = "complete"
    FAILED = "failed"


IN_FLIGHT_STATES = {
    SubmissionState.SUBMITTING,
    SubmissionState.AWAITING_CLASSIFICATION,
    SubmissionState.AWAITING_RESPONSE,
}


class CompanionSession:
    """State of one user session: latest turn, history and capabilities."""

    def __init__(
        self,
        analyze_client: AnalyzeEmotionClient,
        vision_source: Optional[VisionSignalSource] = None,
        speech_input: Optional[SpeechInput] = None,
        history: Optional[SessionHistory] = None,
        notifier: Optional[Notifier] = None
    ):
        self.analyze_client = analyze_client
        self.vision_source = vision_source
        self.speech_input = speech_input or SpeechInput()
        self.history = history if history is not None else SessionHistory()
        self.notifier = notifier or Notifier()

        self.state = SubmissionState.IDLE
        self.current_turn: Optional[ConversationTurn] = None
        self._listeners: List[Callable[["CompanionSession"], None]] = []
        self._lock = asyncio.Lock()
        self._submission_count = 0
        self._pending = 0

    @property
    def is_busy(self) -> bool:
        """True while a submission is in flight or queued; the UI disables input."""
        return self._pending > 0

    @property
    def final_emotion(self) -> Optional[EmotionLabel]:
        return self.current_turn.final_emotion if self.current_turn else None

    def add_listener(self, callback: Callable[["CompanionSession"], None]) -> None:
        self._listeners.append(callback)

    def latest_vision_emotion(self) -> Optional[EmotionLabel]:
        if self.vision_source is None:
            return None
        return self.vision_source.latest_emotion()

    async def submit(self, text: str) -> Optional[ConversationTurn]:
        """
        Run one submission.

        Args:
            text: User text, typed or transcribed

        Returns:
            The new ConversationTurn, or None if the text was empty or the
            submission failed (a failure notice has been issued)
        """
        if not text or not text.strip():
            logger.debug("Ignoring empty submission")
            return None

        self._submission_count += 1
        submission_number = self._submission_count
        self._pending += 1
        try:
            async with self._lock:
                return await self._run_submission(text, submission_number)
        finally:
            self._pending -= 1

    async def _run_submission(self, text: str, submission_number: int) -> Optional[ConversationTurn]:
        self.state = SubmissionState.SUBMITTING
        vision_emotion = self.latest_vision_emotion()
        self.notifier.loading(ANALYZING_MESSAGE)
        logger.info(f"Submission #{submission_number}: {len(text)} chars, vision emotion: "
                    f"{vision_emotion.value if vision_emotion else 'none'}")

        try:
            self.state = SubmissionState.AWAITING_CLASSIFICATION
            result = await self.analyze_client.analyze(text, vision_emotion)

            self.state = SubmissionState.AWAITING_RESPONSE
            final_emotion = fuse_emotions(vision_emotion, result.text_emotion)
            if final_emotion != result.final_emotion:
                logger.warning(f"Server final emotion '{result.final_emotion.value}' disagrees with "
                               f"local fusion '{final_emotion.value}', using local")

            turn = ConversationTurn(
                input_text=text,
                vision_emotion=vision_emotion,
                text_emotion=result.text_emotion,
                final_emotion=final_emotion,
                ai_response=result.empathetic_response
            )
        except ServiceError as e:
            self.state = SubmissionState.FAILED
            logger.error(f"Submission #{submission_number} failed: {e}")
            self.notifier.error(FAILURE_MESSAGE)
            return None

        self.current_turn = turn
        self.history.record(turn.final_emotion)
        self.state = SubmissionState.COMPLETE
        self.notifier.success(SUCCESS_MESSAGE)
        logger.info(f"Submission #{submission_number} complete: {turn.text_emotion.value} -> {turn.final_emotion.value}")

        for callback in self._listeners:
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Session listener failed: {e}", exc_info=True)

        return turn

    async def capture_voice(self) -> str:
        """
        Capture one spoken utterance for the text box.

        Returns:
            Transcript, or "" if speech is unavailable (an error notice is issued)
        """
        self.notifier.info("Listening...")
        try:
            transcript = await self.speech_input.capture_utterance()
        except CapabilityUnavailable as e:
            logger.warning(f"Voice capture unavailable: {e}")
            self.notifier.error("Voice recognition error" if self.speech_input.is_supported
                                else "Speech recognition not supported in this browser")
            return ""

        self.notifier.success("Voice captured")
        return transcript

    async def start_camera(self) -> bool:
        """Start the vision source if it supports it. Returns True if the camera is active."""
        start = getattr(self.vision_source, "start", None)
        if start is None:
            self.notifier.error("Failed to access camera")
            return False

        try:
            await start()
        except CapabilityUnavailable as e:
            logger.warning(f"Camera unavailable: {e}")
            self.notifier.error("Failed to access camera")
            return False

        self.notifier.success("Camera activated")
        return True

    async def stop_camera(self) -> None:
        stop = getattr(self.vision_source, "stop", None)
        if stop is not None:
            await stop()
            self.notifier.info("Camera stopped")
