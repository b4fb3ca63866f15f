"""
Presentation Data

Pure derivations of session state for display: emoji, colours, the
emotion histogram and card contents. No state of its own.
"""

from typing import Dict, List, Optional

from fusion.models import ConversationTurn, EmotionLabel, EmotionSample
from session.history import SessionHistory

DEFAULT_EMOJI = "😐"

EMOTION_EMOJI = {
    EmotionLabel.HAPPY: "😊",
    EmotionLabel.SAD: "😔",
    EmotionLabel.ANGRY: "😠",
    EmotionLabel.FEAR: "😨",
    EmotionLabel.NEUTRAL: "😐",
}

DEFAULT_CHART_COLOR = "hsl(var(--primary))"

CHART_COLORS = {
    EmotionLabel.HAPPY: "hsl(var(--primary))",
    EmotionLabel.SAD: "hsl(200, 70%, 60%)",
    EmotionLabel.ANGRY: "hsl(0, 70%, 60%)",
    EmotionLabel.FEAR: "hsl(280, 70%, 70%)",
    EmotionLabel.NEUTRAL: "hsl(var(--muted-foreground))",
}

# Voice Emotion Mode page tint
BACKGROUND_COLORS = {
    EmotionLabel.HAPPY: "hsl(45, 90%, 92%)",
    EmotionLabel.SAD: "hsl(210, 60%, 90%)",
    EmotionLabel.ANGRY: "hsl(0, 70%, 92%)",
    EmotionLabel.FEAR: "hsl(270, 50%, 92%)",
    EmotionLabel.NEUTRAL: "hsl(0, 0%, 96%)",
}

EMPTY_CHART_MESSAGE = "Your emotional journey will appear here as you interact with EmpathAI."
EMPTY_RESPONSE_MESSAGE = "I'm here to listen and support you. Share your feelings to get started."


def emotion_emoji(emotion: Optional[EmotionLabel]) -> str:
    return EMOTION_EMOJI.get(emotion, DEFAULT_EMOJI)


def display_name(emotion: EmotionLabel) -> str:
    return emotion.value.capitalize()


def background_color(emotion: Optional[EmotionLabel]) -> Optional[str]:
    """Page tint for Voice Emotion Mode, or None before the first turn."""
    if emotion is None:
        return None
    return BACKGROUND_COLORS[emotion]


def build_chart_data(history: SessionHistory) -> List[Dict]:
    """
    Histogram bars, one per emotion seen, in first-occurrence order.

    Returns:
        List of {"emotion": "Happy", "count": 2, "color": "..."}
    """
    return [
        {
            "emotion": display_name(emotion),
            "count": count,
            "color": CHART_COLORS.get(emotion, DEFAULT_CHART_COLOR),
        }
        for emotion, count in history.frequency_table().items()
    ]


def build_chart_view(history: SessionHistory) -> Dict:
    if len(history) == 0:
        return {"title": "Emotion Insights", "empty": True, "message": EMPTY_CHART_MESSAGE}
    return {
        "title": "Emotion Insights",
        "empty": False,
        "bars": build_chart_data(history),
        "total_interactions": len(history),
    }


def build_response_card(turn: Optional[ConversationTurn]) -> Dict:
    if turn is None or not turn.ai_response:
        return {"title": "AI Support", "empty": True, "message": EMPTY_RESPONSE_MESSAGE}
    return {
        "title": "AI Support",
        "empty": False,
        "emoji": emotion_emoji(turn.final_emotion),
        "emotion": turn.final_emotion.value,
        "response": turn.ai_response,
    }


def build_vision_card(sample: Optional[EmotionSample], camera_active: bool) -> Dict:
    card = {"title": "Vision Detection", "camera_active": camera_active}
    if sample is not None:
        card.update({
            "emoji": emotion_emoji(sample.label),
            "emotion": sample.label.value,
            "confidence": f"{sample.confidence * 100:.0f}%",
        })
    return card
