from unittest.mock import patch

from fastapi.testclient import TestClient

from app.config import settings
from app.main import app
from app.models.analysis import AnalysisResult, Summary
from app.services.corpus import SAMPLE_REVIEWS

client = TestClient(app)


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": "1.0.0"}


def test_analyze_provided_reviews_falls_back_without_api_key():
    response = client.post(
        "/analyze",
        json={
            "reviews": [
                {"text": "BEST PRODUCT EVER!!! BUY NOW!!! AMAZING!!! 5 STARS!!! PERFECT!!!"},
                {"text": "Received the item last week. Packaging was good. Shipping was slow."},
            ]
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["analysisMethod"] == "Pattern-based + AI"
    assert body["totalReviewsAnalyzed"] == 2
    assert body["productUrl"] == "N/A (reviews provided directly)"
    assert [r["verdict"] for r in body["reviews"]] == ["FAKE", "GENUINE"]
    assert body["summary"]["fakeCount"] + body["summary"]["genuineCount"] == 2
    assert "rawAnalysis" not in body


def test_analyze_without_input_uses_sample():
    response = client.post("/analyze", json={})
    assert response.status_code == 200
    assert response.json()["totalReviewsAnalyzed"] == len(SAMPLE_REVIEWS)


@patch("app.services.claude_client.classify")
def test_analyze_degraded_claude_result(mock_classify):
    mock_classify.return_value = AnalysisResult(
        raw_analysis="Reviews look mostly organic.",
        summary=Summary(total_reviews=1, trust_score=80),
    )
    response = client.post("/analyze", json={"reviews": [{"text": "Does the job, nothing fancy."}]})

    body = response.json()
    assert body["analysisMethod"] == "AI-powered"
    assert body["rawAnalysis"] == "Reviews look mostly organic."
    assert body["summary"] == {"totalReviews": 1, "trustScore": 80}
    assert "reviews" not in body


def test_analyze_rejects_bad_max_reviews():
    response = client.post("/analyze", json={"maxReviews": 0})
    assert response.status_code == 422


def test_reports_are_listed_and_fetched():
    created = client.post("/analyze", json={"reviews": [{"text": "Sturdy, but the handle squeaks."}]}).json()

    listing = client.get("/reports").json()
    assert listing[0]["reportId"] == created["reportId"]

    fetched = client.get(f"/reports/{created['reportId']}")
    assert fetched.status_code == 200
    assert fetched.json() == created


def test_report_not_found():
    response = client.get("/reports/" + "f" * 32)
    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_max_reviews_defaults_to_setting():
    reviews = [{"text": f"Review number {i} of a sturdy garden hose."} for i in range(5)]
    with patch.object(settings, "max_reviews", 3):
        response = client.post("/analyze", json={"reviews": reviews})
    assert response.status_code == 200
    assert response.json()["totalReviewsAnalyzed"] == 3


def test_reports_listing_survives_corrupt_file():
    client.post("/analyze", json={"reviews": [{"text": "Sturdy, but the handle squeaks."}]})
    with open(f"{settings.reports_path}/broken.json", "w", encoding="utf-8") as f:
        f.write("{")
    response = client.get("/reports")
    assert response.status_code == 200
    assert len(response.json()) == 1
