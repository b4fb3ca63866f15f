"""
Vision Signal Source

Produces periodic (emotion, confidence) samples from a camera feed. The
camera and the vision classifier are capabilities injected from outside;
the defaults simulate both.
"""

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from typing import Callable, Optional

from fusion.config_loader import load_config
from fusion.models import EmotionLabel, EmotionSample
from utils.errors import CapabilityUnavailable

logger = logging.getLogger(__name__)

# Load configuration
_session_config = load_config().get("session", {})
DEFAULT_INTERVAL_SECONDS = _session_config.get("vision_interval_seconds", 3.0)


class CameraHandle(ABC):
    """An acquired camera. Owned exclusively by one vision source."""

    @abstractmethod
    def read_frame(self):
        """Return the current frame (any object the detector understands)."""

    @abstractmethod
    def release(self) -> None:
        """Release the underlying device. Must be safe to call more than once."""


class SimulatedCamera(CameraHandle):
    """Camera stand-in that yields no pixels; pairs with SimulatedEmotionDetector."""

    def __init__(self):
        self.released = False

    def read_frame(self):
        if self.released:
            raise RuntimeError("Camera already released")
        return None

    def release(self) -> None:
        self.released = True


class SimulatedEmotionDetector:
    """
    Stand-in for a facial emotion model.

    Picks a random label with confidence in [0.6, 1.0). Pass a seeded
    random.Random for reproducible sequences.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self._labels = list(EmotionLabel)

    def detect(self, frame) -> EmotionSample:
        label = self.rng.choice(self._labels)
        confidence = self.rng.random() * 0.4 + 0.6
        return EmotionSample(label=label, confidence=confidence, source="vision")


class VisionSignalSource(ABC):
    """Anything that can report the latest vision sample."""

    @abstractmethod
    def get_latest_sample(self) -> Optional[EmotionSample]:
        """Latest sample, or None if none yet or the source is inactive."""

    def latest_emotion(self) -> Optional[EmotionLabel]:
        sample = self.get_latest_sample()
        return sample.label if sample else None


class CameraVisionSource(VisionSignalSource):
    """
    Polls a camera through a detector on a fixed interval.

    start() and stop() are idempotent. Used as an async context manager the
    camera is released on exit whether or not the body raised.
    """

    def __init__(
        self,
        camera_factory: Callable[[], CameraHandle] = SimulatedCamera,
        detector: Optional[SimulatedEmotionDetector] = None,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        on_sample: Optional[Callable[[EmotionSample], None]] = None
    ):
        self.camera_factory = camera_factory
        self.detector = detector or SimulatedEmotionDetector()
        self.interval_seconds = interval_seconds
        self.on_sample = on_sample
        self._camera: Optional[CameraHandle] = None
        self._task: Optional[asyncio.Task] = None
        self._latest: Optional[EmotionSample] = None

    @property
    def is_active(self) -> bool:
        return self._camera is not None

    def get_latest_sample(self) -> Optional[EmotionSample]:
        return self._latest

    async def start(self) -> None:
        """
        Acquire the camera, take a first sample and begin polling.

        Raises:
            CapabilityUnavailable: If the camera cannot be opened or cannot deliver a frame
        """
        if self.is_active:
            return

        try:
            self._camera = self.camera_factory()
        except CapabilityUnavailable:
            raise
        except Exception as e:
            logger.error(f"Camera error: {e}")
            raise CapabilityUnavailable("camera", str(e)) from e

        logger.info("Camera activated")
        try:
            self.sample_once()
        except Exception as e:
            logger.error(f"Camera frame error: {e}")
            await self.stop()
            raise CapabilityUnavailable("camera", str(e)) from e
        self._task = asyncio.create_task(self._poll())

    async def stop(self) -> None:
        """Stop polling, release the camera and forget the latest sample."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        camera, self._camera = self._camera, None
        if camera is not None:
            camera.release()
            logger.info("Camera stopped")
        self._latest = None

    async def toggle(self) -> bool:
        """Start if inactive, stop if active. Returns the new active state."""
        if self.is_active:
            await self.stop()
        else:
            await self.start()
        return self.is_active

    def sample_once(self) -> Optional[EmotionSample]:
        """Read one frame, classify it and store the result as the latest sample."""
        if self._camera is None:
            return None

        frame = self._camera.read_frame()
        sample = self.detector.detect(frame)
        self._latest = sample
        logger.debug(f"Vision emotion: {sample.label.value} (confidence: {sample.confidence:.2f})")
        if self.on_sample is not None:
            self.on_sample(sample)
        return sample

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.sample_once()
            except Exception as e:
                logger.warning(f"Vision sample failed: {e}")

    async def __aenter__(self) -> "CameraVisionSource":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
