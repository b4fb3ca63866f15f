"""
Core Fusion Logic for Companion Service

This module implements the negative-affect priority rule that reconciles the
vision-derived and text-derived emotion labels into one final emotion. The
same function is used by the analyze endpoint and by the companion session.
"""

import logging
from typing import Optional, Union

from fusion.models import EmotionLabel

logger = logging.getLogger(__name__)

NEGATIVE_EMOTIONS = frozenset({EmotionLabel.SAD, EmotionLabel.ANGRY, EmotionLabel.FEAR})
DEFAULT_EMOTION = EmotionLabel.NEUTRAL

# Synonyms a language model tends to answer with instead of the exact label
EMOTION_ALIASES = {
    "happiness": EmotionLabel.HAPPY,
    "joy": EmotionLabel.HAPPY,
    "joyful": EmotionLabel.HAPPY,
    "glad": EmotionLabel.HAPPY,
    "excited": EmotionLabel.HAPPY,
    "sadness": EmotionLabel.SAD,
    "unhappy": EmotionLabel.SAD,
    "depressed": EmotionLabel.SAD,
    "anger": EmotionLabel.ANGRY,
    "mad": EmotionLabel.ANGRY,
    "frustrated": EmotionLabel.ANGRY,
    "fearful": EmotionLabel.FEAR,
    "afraid": EmotionLabel.FEAR,
    "scared": EmotionLabel.FEAR,
    "anxious": EmotionLabel.FEAR,
    "anxiety": EmotionLabel.FEAR,
    "calm": EmotionLabel.NEUTRAL,
}


def is_negative(label: Optional[EmotionLabel]) -> bool:
    return label in NEGATIVE_EMOTIONS


def normalize_emotion_label(raw: Union[str, EmotionLabel, None]) -> Optional[EmotionLabel]:
    """
    Map a raw label string onto the closed EmotionLabel set.

    Case, surrounding whitespace, quotes and trailing punctuation are ignored,
    and common synonyms are accepted.

    Args:
        raw: Raw string (e.g. a model reply such as "Sad." or "anger")

    Returns:
        The matching EmotionLabel, or None if the string is empty or unrecognised
    """
    if raw is None:
        return None
    if isinstance(raw, EmotionLabel):
        return raw

    cleaned = raw.strip().strip("\"'`*.!,;: \n\t").lower()
    if not cleaned:
        return None

    try:
        return EmotionLabel(cleaned)
    except ValueError:
        pass

    if cleaned in EMOTION_ALIASES:
        return EMOTION_ALIASES[cleaned]

    logger.debug(f"Unrecognised emotion label '{raw}'")
    return None


def fuse_emotions(
    vision: Optional[EmotionLabel],
    text: Optional[EmotionLabel]
) -> EmotionLabel:
    """
    Fuse the vision and text emotion labels into one final emotion.

    Rule, in priority order:
    1. A negative vision emotion (sad, angry, fear) wins.
    2. Otherwise a negative text emotion wins.
    3. Otherwise the text emotion, then the vision emotion, then neutral.

    The function is pure: identical inputs always give the same output.

    Args:
        vision: Latest vision emotion, or None when no camera sample exists
        text: Classified text emotion, or None

    Returns:
        The final EmotionLabel
    """
    if is_negative(vision):
        return vision
    if is_negative(text):
        return text
    if text is not None:
        return text
    if vision is not None:
        return vision
    return DEFAULT_EMOTION
