"""
Pydantic Models for Companion Service

This module defines the emotion label set, request/response models for the
analyze endpoint, and the data structures shared with the companion session.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Literal
from datetime import datetime


class EmotionLabel(str, Enum):
    """Closed set of emotion labels used by every component."""
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    FEAR = "fear"
    NEUTRAL = "neutral"


class EmotionSample(BaseModel):
    """A single emotion reading from one modality."""
    label: EmotionLabel
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence score between 0.0 and 1.0")
    source: Literal["vision", "text"]


class HistoryEntry(BaseModel):
    """One fused emotion recorded after a successful turn."""
    model_config = ConfigDict(frozen=True)

    emotion: EmotionLabel
    timestamp: datetime


class ConversationTurn(BaseModel):
    """The result of one complete submission: input, both modalities, fused emotion and reply."""
    input_text: str
    vision_emotion: Optional[EmotionLabel] = None
    text_emotion: EmotionLabel
    final_emotion: EmotionLabel
    ai_response: str


class AnalyzeEmotionRequest(BaseModel):
    """Request model for the analyze endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., description="User utterance, typed or transcribed")
    vision_emotion: Optional[EmotionLabel] = Field(
        default=None,
        alias="visionEmotion",
        description="Latest vision emotion, or empty string when the camera is off"
    )

    @field_validator("vision_emotion", mode="before")
    @classmethod
    def _blank_vision_is_none(cls, value):
        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip().lower()
            if not value:
                return None
        return value


class AnalyzeEmotionResponse(BaseModel):
    """Response model for the analyze endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    text_emotion: EmotionLabel = Field(..., alias="textEmotion")
    final_emotion: EmotionLabel = Field(..., alias="finalEmotion")
    empathetic_response: str = Field(..., alias="empatheticResponse")


class ErrorResponse(BaseModel):
    """Body returned with every non-2xx status from the analyze endpoint."""
    error: str
