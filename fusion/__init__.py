"""
Fusion package for the emotion analysis service.

This package provides:
- API endpoints: POST /emotion/analyze, GET /emotion/health
- Orchestrator: Classification, fusion and response generation for one utterance
- Model clients: AI gateway clients for classification and response generation
- Fusion logic: Negative-affect priority rule shared with the companion session
"""

from . import api
from . import orchestrator
from . import model_clients
from . import fusion_logic
from . import models

__all__ = [
    'api',
    'orchestrator',
    'model_clients',
    'fusion_logic',
    'models'
]
