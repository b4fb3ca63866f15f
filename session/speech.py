"""
Speech Input

Single-utterance speech capture behind an injectable transcriber capability.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from fusion.config_loader import load_config
from utils.errors import CapabilityUnavailable

logger = logging.getLogger(__name__)

_session_config = load_config().get("session", {})
DEFAULT_LOCALE = _session_config.get("speech_locale", "en-US")


class SpeechTranscriber(ABC):
    """Platform speech-to-text capability."""

    @abstractmethod
    async def transcribe(self, locale: str, continuous: bool = False, interim_results: bool = False) -> str:
        """Listen for one utterance and return its transcript."""


class SpeechInput:
    """Captures one utterance per activation with a fixed locale."""

    def __init__(self, transcriber: Optional[SpeechTranscriber] = None, locale: str = DEFAULT_LOCALE):
        self.transcriber = transcriber
        self.locale = locale
        self.is_listening = False

    @property
    def is_supported(self) -> bool:
        return self.transcriber is not None

    async def capture_utterance(self) -> str:
        """
        Capture a single, non-continuous utterance.

        Returns:
            Transcript with surrounding whitespace removed (may be empty)

        Raises:
            CapabilityUnavailable: If no transcriber is available or it fails
        """
        if self.transcriber is None:
            raise CapabilityUnavailable("speech recognition", "not supported on this device")
        if self.is_listening:
            raise CapabilityUnavailable("speech recognition", "already listening")

        self.is_listening = True
        logger.info(f"Listening... (locale: {self.locale})")
        try:
            transcript = await self.transcriber.transcribe(self.locale, continuous=False, interim_results=False)
        except CapabilityUnavailable:
            raise
        except Exception as e:
            logger.error(f"Speech recognition error: {e}")
            raise CapabilityUnavailable("speech recognition", str(e)) from e
        finally:
            self.is_listening = False

        transcript = (transcript or "").strip()
        logger.info(f"Voice captured ({len(transcript)} chars)")
        return transcript
