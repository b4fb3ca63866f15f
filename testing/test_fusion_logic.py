"""
Unit Tests: fuse_emotions() and normalize_emotion_label()

Tests the negative-affect priority rule that reconciles the vision and
text emotion labels.

Rule: negative vision > negative text > text > vision > neutral
Negative set: sad, angry, fear

Run with: pytest testing/test_fusion_logic.py -v
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fusion.models import EmotionLabel
from fusion.fusion_logic import fuse_emotions, normalize_emotion_label, is_negative, NEGATIVE_EMOTIONS


NEGATIVE = [EmotionLabel.SAD, EmotionLabel.ANGRY, EmotionLabel.FEAR]
NON_NEGATIVE = [EmotionLabel.HAPPY, EmotionLabel.NEUTRAL]
ALL_LABELS = list(EmotionLabel)


# =============================================================================
# Test Suite: Priority Rule
# =============================================================================

class TestNegativePriority:
    """Negative emotions must never be suppressed by a neutral/positive reading."""

    @pytest.mark.parametrize("vision", NEGATIVE)
    @pytest.mark.parametrize("text", ALL_LABELS + [None])
    def test_negative_vision_always_wins(self, vision, text):
        assert fuse_emotions(vision, text) == vision

    @pytest.mark.parametrize("vision", NON_NEGATIVE + [None])
    @pytest.mark.parametrize("text", NEGATIVE)
    def test_negative_text_wins_over_non_negative_vision(self, vision, text):
        assert fuse_emotions(vision, text) == text

    @pytest.mark.parametrize("vision", NON_NEGATIVE + [None])
    @pytest.mark.parametrize("text", NON_NEGATIVE)
    def test_text_wins_when_neither_is_negative(self, vision, text):
        assert fuse_emotions(vision, text) == text

    @pytest.mark.parametrize("vision", NON_NEGATIVE)
    def test_vision_used_when_text_missing(self, vision):
        assert fuse_emotions(vision, None) == vision

    def test_neutral_when_both_missing(self):
        assert fuse_emotions(None, None) == EmotionLabel.NEUTRAL


# =============================================================================
# Test Suite: Vision and text combinations
# =============================================================================

class TestVisionTextCombinations:

    def test_happy_face_sad_text_is_sad(self):
        """vision=happy, text=sad -> sad"""
        assert fuse_emotions(EmotionLabel.HAPPY, EmotionLabel.SAD) == EmotionLabel.SAD

    def test_no_camera_happy_text_is_happy(self):
        """vision empty, text=happy -> happy"""
        assert fuse_emotions(None, EmotionLabel.HAPPY) == EmotionLabel.HAPPY

    def test_angry_face_happy_text_is_angry(self):
        """vision=angry, text=happy -> angry"""
        assert fuse_emotions(EmotionLabel.ANGRY, EmotionLabel.HAPPY) == EmotionLabel.ANGRY

    def test_both_negative_vision_wins(self):
        assert fuse_emotions(EmotionLabel.FEAR, EmotionLabel.SAD) == EmotionLabel.FEAR


class TestPurity:

    def test_total_and_repeatable_over_label_set(self):
        for vision in ALL_LABELS + [None]:
            for text in ALL_LABELS + [None]:
                first = fuse_emotions(vision, text)
                assert first in ALL_LABELS
                for _ in range(3):
                    assert fuse_emotions(vision, text) == first

    def test_negative_set(self):
        assert NEGATIVE_EMOTIONS == set(NEGATIVE)
        assert is_negative(EmotionLabel.SAD)
        assert not is_negative(EmotionLabel.NEUTRAL)
        assert not is_negative(None)


# =============================================================================
# Test Suite: Label Normalization
# =============================================================================

class TestNormalizeEmotionLabel:

    @pytest.mark.parametrize("raw,expected", [
        ("happy", EmotionLabel.HAPPY),
        ("Sad", EmotionLabel.SAD),
        ("  ANGRY\n", EmotionLabel.ANGRY),
        ("fear.", EmotionLabel.FEAR),
        ('"neutral"', EmotionLabel.NEUTRAL),
        ("**Sad**", EmotionLabel.SAD),
        ("anger", EmotionLabel.ANGRY),
        ("sadness", EmotionLabel.SAD),
        ("joy", EmotionLabel.HAPPY),
        ("scared", EmotionLabel.FEAR),
    ])
    def test_known_labels_and_synonyms(self, raw, expected):
        assert normalize_emotion_label(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "surprise", "I think the user is sad", None])
    def test_unknown_or_empty_is_rejected(self, raw):
        assert normalize_emotion_label(raw) is None

    def test_enum_passes_through(self):
        assert normalize_emotion_label(EmotionLabel.FEAR) is EmotionLabel.FEAR
