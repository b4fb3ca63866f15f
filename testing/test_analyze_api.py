"""
API Tests: POST /emotion/analyze

Drives the FastAPI app with TestClient. The analysis service is replaced
through dependency_overrides so no gateway is contacted.

Run with: pytest testing/test_analyze_api.py -v
"""

import pytest
import httpx
import sys
import os
from fastapi.testclient import TestClient

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import app
from fusion.models import EmotionLabel
from fusion.model_clients import EmotionClassifierClient, ResponseGeneratorClient, build_chat_client
from fusion.orchestrator import EmotionAnalysisService, get_analysis_service
from utils.errors import ClassificationServiceError, ResponseGenerationError


# =============================================================================
# Test Fixtures & Helpers
# =============================================================================

class FakeClassifier:
    def __init__(self, label=EmotionLabel.HAPPY, error=None):
        self.label = label
        self.error = error
        self.calls = []

    async def classify(self, text):
        self.calls.append(text)
        if self.error:
            raise self.error
        return self.label


class FakeGenerator:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def generate(self, emotion, text):
        self.calls.append((emotion, text))
        if self.error:
            raise self.error
        return f"I can tell you feel {emotion.value}."


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def use_service(classifier, generator=None):
    service = EmotionAnalysisService(classifier=classifier, generator=generator or FakeGenerator())
    app.dependency_overrides[get_analysis_service] = lambda: service
    return service


# =============================================================================
# Test Suite: Successful analysis
# =============================================================================

class TestAnalyzeSuccess:

    def test_happy_vision_sad_text_is_sad(self, client):
        """Negative text emotion overrides positive vision"""
        service = use_service(FakeClassifier(EmotionLabel.SAD))

        response = client.post("/emotion/analyze", json={"text": "I miss home", "visionEmotion": "happy"})

        assert response.status_code == 200
        assert response.json() == {
            "textEmotion": "sad",
            "finalEmotion": "sad",
            "empatheticResponse": "I can tell you feel sad."
        }
        assert service.generator.calls == [(EmotionLabel.SAD, "I miss home")]

    def test_no_camera_happy_text_is_happy(self, client):
        """Without a vision emotion the text emotion is final"""
        use_service(FakeClassifier(EmotionLabel.HAPPY))

        response = client.post("/emotion/analyze", json={"text": "Great day!", "visionEmotion": ""})

        assert response.status_code == 200
        assert response.json()["finalEmotion"] == "happy"

    def test_angry_vision_happy_text_is_angry(self, client):
        """Negative vision emotion overrides positive text"""
        service = use_service(FakeClassifier(EmotionLabel.HAPPY))

        response = client.post("/emotion/analyze", json={"text": "All good", "visionEmotion": "angry"})

        body = response.json()
        assert body["textEmotion"] == "happy"
        assert body["finalEmotion"] == "angry"
        assert service.generator.calls[0][0] == EmotionLabel.ANGRY

    def test_missing_vision_field_is_treated_as_empty(self, client):
        use_service(FakeClassifier(EmotionLabel.NEUTRAL))

        response = client.post("/emotion/analyze", json={"text": "ok"})

        assert response.status_code == 200
        assert response.json()["finalEmotion"] == "neutral"


# =============================================================================
# Test Suite: Failures
# =============================================================================

class TestAnalyzeFailures:

    def test_whitespace_text_is_rejected_without_classifying(self, client):
        classifier = FakeClassifier()
        use_service(classifier)

        response = client.post("/emotion/analyze", json={"text": "   ", "visionEmotion": ""})

        assert response.status_code == 400
        assert response.json() == {"error": "Text cannot be empty"}
        assert classifier.calls == []

    def test_unknown_vision_label_is_rejected(self, client):
        use_service(FakeClassifier())

        response = client.post("/emotion/analyze", json={"text": "hi", "visionEmotion": "surprised"})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_classifier_failure_returns_error_body(self, client):
        generator = FakeGenerator()
        use_service(FakeClassifier(error=ClassificationServiceError("EmotionClassifier returned HTTP 500")), generator)

        response = client.post("/emotion/analyze", json={"text": "hi", "visionEmotion": ""})

        assert response.status_code == 502
        assert response.json() == {"error": "EmotionClassifier returned HTTP 500"}
        assert generator.calls == []

    def test_generation_failure_returns_error_body(self, client):
        use_service(FakeClassifier(), FakeGenerator(error=ResponseGenerationError("ResponseGenerator timed out")))

        response = client.post("/emotion/analyze", json={"text": "hi", "visionEmotion": ""})

        assert response.status_code == 502
        assert response.json()["error"] == "ResponseGenerator timed out"

    def test_missing_api_key_is_a_500(self, client, monkeypatch):
        monkeypatch.delenv("AI_GATEWAY_API_KEY", raising=False)

        response = client.post("/emotion/analyze", json={"text": "hi", "visionEmotion": ""})

        assert response.status_code == 500
        assert response.json() == {"error": "AI_GATEWAY_API_KEY is not configured"}

    def test_non_string_gateway_content_returns_error_body(self, client):
        def gateway(request):
            return httpx.Response(200, json={"choices": [{"message": {"content": ["sad"]}}]})

        llm = build_chat_client("test-key", transport=httpx.MockTransport(gateway))
        service = EmotionAnalysisService(EmotionClassifierClient(llm), ResponseGeneratorClient(llm))
        app.dependency_overrides[get_analysis_service] = lambda: service

        response = client.post(
            "/emotion/analyze",
            json={"text": "hi", "visionEmotion": ""},
            headers={"Origin": "http://localhost:5173"}
        )

        assert response.status_code == 502
        assert "error" in response.json()
        assert response.headers["access-control-allow-origin"] == "*"

    def test_unexpected_error_returns_500_error_body(self, client):
        use_service(FakeClassifier(error=RuntimeError("classifier crashed")))

        response = client.post(
            "/emotion/analyze",
            json={"text": "hi", "visionEmotion": ""},
            headers={"Origin": "http://localhost:5173"}
        )

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"error": "classifier crashed"}
        assert response.headers["access-control-allow-origin"] == "*"


# =============================================================================
# Test Suite: CORS and health
# =============================================================================

class TestCorsAndHealth:

    def test_preflight_is_accepted(self, client):
        response = client.options(
            "/emotion/analyze",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type, apikey, x-client-info",
            }
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        allowed = response.headers["access-control-allow-headers"].lower()
        for header in ("authorization", "x-client-info", "apikey", "content-type"):
            assert header in allowed

    def test_error_responses_carry_cors_header(self, client, monkeypatch):
        monkeypatch.delenv("AI_GATEWAY_API_KEY", raising=False)

        response = client.post(
            "/emotion/analyze",
            json={"text": "hi"},
            headers={"Origin": "http://localhost:5173"}
        )

        assert response.status_code == 500
        assert response.headers["access-control-allow-origin"] == "*"

    def test_emotion_health_reports_missing_key(self, client, monkeypatch):
        monkeypatch.delenv("AI_GATEWAY_API_KEY", raising=False)
        response = client.get("/emotion/health")
        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_emotion_health_with_key(self, client, monkeypatch):
        monkeypatch.setenv("AI_GATEWAY_API_KEY", "test-key")
        response = client.get("/emotion/health")
        assert response.status_code == 200
        assert response.json()["gateway"] == "configured"

    def test_root_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
