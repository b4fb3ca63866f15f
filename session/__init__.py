"""
Session package for the companion front end.

This package provides:
- Pipeline: Per-submission state machine (CompanionSession)
- Companion client: HTTP client for POST /emotion/analyze
- Vision: Camera-backed vision signal source (simulated detector by default)
- Speech: Single-utterance speech capture
- History: Append-only emotion history and frequency table
- Presentation: Emoji, colours, histogram and card data
"""

from . import history
from . import vision
from . import speech
from . import notifications
from . import companion_client
from . import pipeline
from . import presentation

__all__ = [
    'history',
    'vision',
    'speech',
    'notifications',
    'companion_client',
    'pipeline',
    'presentation'
]
