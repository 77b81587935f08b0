import pytest

from gcloud_lite.etl import annotations


@pytest.fixture
def response():
    return {
        "labelAnnotations": [
            {"mid": "/m/01g317", "description": "person", "score": 0.9481349, "topicality": 0.9481349},
            "garbage",
            {"mid": "/m/09j2d", "description": "clothing", "score": 0.8},
        ],
        "logoAnnotations": [{"mid": "/m/0b34hf", "description": "Google", "score": 0.70057315}],
    }


def test_entities_from_response_skips_non_mappings(response):
    labels = annotations.entities_from_response(response, "labels")
    assert [label.description for label in labels] == ["person", "clothing"]
    assert labels[0].topicality == 0.9481349


def test_entities_from_response_missing_feature(response):
    assert annotations.entities_from_response(response, "landmarks") == []
    assert annotations.entities_from_response({"landmarkAnnotations": {"mid": "x"}}, "landmarks") == []
    assert annotations.entities_from_response(None, "logos") == []


def test_entities_from_response_unknown_feature(response):
    with pytest.raises(ValueError):
        annotations.entities_from_response(response, "faces")


def test_summarize_response(response):
    summary = annotations.summarize_response(response)
    assert set(summary) == {"labels", "landmarks", "logos"}
    assert summary["landmarks"] == []
    assert summary["logos"][0]["id"] == "/m/0b34hf"
    assert summary["logos"][0]["bounds"] == []


def test_error_is_logged_not_raised(caplog):
    payload = {"error": {"code": 3, "message": "Bad image data."}}
    with caplog.at_level("WARNING"):
        summary = annotations.summarize_response(payload)

    assert summary == {"labels": [], "landmarks": [], "logos": []}
    assert "Bad image data." in " ".join(caplog.messages)
