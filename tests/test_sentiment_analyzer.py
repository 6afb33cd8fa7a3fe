"""
Tests for the hybrid sentiment analyzer.

Tests cover:
- Rule-based scoring, negation and emotion tags
- Remote payload normalisation (star and binary models)
- Remote transport failures
- Fallback behaviour of analyze_sentiment
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from ai_services import sentiment_analyzer
from ai_services.emotions import extract_emotions
from ai_services.sentiment_analyzer import (
    SENTIMENT_LABELS,
    RemoteUnavailable,
    _rule_based_label,
    _star_label,
    analyze_sentiment,
    parse_remote_output,
    remote_sentiment,
    round_half_up,
    rule_based_sentiment,
)


@pytest.fixture
def remote_env(monkeypatch):
    monkeypatch.setenv("HUGGINGFACE_API_URL", "https://inference.example.test/models/stars")
    monkeypatch.setenv("HUGGINGFACE_API_TOKEN", "hf_test_token")


def _response(payload, status_code=200):
    response = MagicMock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.text = "body"
    response.json.return_value = payload
    return response


# =============================================================
# TEST: Emotion keyword extractor
# =============================================================

class TestExtractEmotions:

    def test_exact_token_match_only(self):
        assert extract_emotions("I am happy today") == ["joy"]
        assert extract_emotions("I am happyish today") == []

    def test_table_order_and_cap(self):
        text = "happy sad angry scared surprised"
        assert extract_emotions(text) == ["joy", "sadness", "anger"]

    def test_empty_text(self):
        assert extract_emotions("") == []
        assert extract_emotions(None) == []


# =============================================================
# TEST: Rule-based scorer
# =============================================================

class TestRuleBasedSentiment:

    def test_positive_text(self):
        result = rule_based_sentiment("I am happy")
        assert result == {
            "score": 9.0,
            "label": "very-positive",
            "confidence": 95,
            "emotions": ["joy"],
        }

    def test_negation_scores_lower(self):
        plain = rule_based_sentiment("I am happy")
        negated = rule_based_sentiment("I am not happy")
        assert negated["score"] < plain["score"]
        assert negated["label"] == "neutral"
        assert negated["confidence"] == 40

    def test_negated_negative_word_counts_as_positive(self):
        result = rule_based_sentiment("I was not stressed")
        assert result["score"] == 5.0

    def test_exam_failure_example(self):
        result = rule_based_sentiment("I failed my exam and feel terrible and hopeless")
        assert result["label"] in ("negative", "very-negative")
        assert result["score"] < 5
        assert result["score"] == 0.0

    def test_empty_text_is_neutral(self):
        result = rule_based_sentiment("")
        assert result == {"score": 5.0, "label": "neutral", "confidence": 40, "emotions": []}

    def test_punctuation_is_stripped_but_apostrophes_kept(self):
        result = rule_based_sentiment("I can't... be happy!")
        # "can't" survives as a negation and cancels the "happy" that follows
        assert result["score"] == 5.0

    def test_substring_emotion_detection_includes_stress(self):
        result = rule_based_sentiment("deadlines everywhere, feeling overwhelmed and worried")
        assert result["emotions"] == ["stress", "fear"]

    def test_emotions_capped_at_three(self):
        result = rule_based_sentiment("happy sad angry scared confident")
        assert result["emotions"] == ["joy", "sadness", "anger"]

    def test_pure(self):
        text = "Tired but proud of what I achieved this week"
        assert rule_based_sentiment(text) == rule_based_sentiment(text)

    @pytest.mark.parametrize("text", [
        "",
        "   ",
        "no no no no",
        "great great great great great great",
        "awful awful awful awful awful",
        "Ünïcode text 🙂 with emoji",
    ])
    def test_result_is_always_well_formed(self, text):
        result = rule_based_sentiment(text)
        assert result["label"] in SENTIMENT_LABELS
        assert 0 <= result["confidence"] <= 100
        assert 0 <= result["score"] <= 10
        assert len(result["emotions"]) <= 3

    def test_accented_letters_are_dropped_from_words(self):
        # "happ\u00e9y" loses its accented letter and reads as "happy"
        assert rule_based_sentiment("I am happ\u00e9y")["score"] == 9.0

    @pytest.mark.parametrize("score, label", [
        (8, "very-positive"),
        (7.99, "positive"),
        (6, "positive"),
        (5.99, "neutral"),
        (4.51, "neutral"),
        (4.5, "negative"),
        (2.51, "negative"),
        (2.5, "very-negative"),
    ])
    def test_label_boundaries(self, score, label):
        assert _rule_based_label(score) == label


class TestRoundHalfUp:

    @pytest.mark.parametrize("value, digits, expected", [
        (62.5, 0, 63),
        (34.5, 0, 35),
        (8.125, 2, 8.13),
        (0.625, 2, 0.63),
        (9.2, 2, 9.2),
    ])
    def test_halves_round_up(self, value, digits, expected):
        assert round_half_up(value, digits) == expected

    def test_whole_numbers_are_ints(self):
        assert isinstance(round_half_up(62.5), int)


# =============================================================
# TEST: Remote payload normalisation
# =============================================================

class TestParseRemoteOutput:

    def test_star_weighted_average(self):
        payload = [{"label": "5 stars", "score": 0.9}, {"label": "1 star", "score": 0.1}]
        result = parse_remote_output(payload, "I love this wonderful day")
        assert result["score"] == 9.2
        assert result["label"] == "very-positive"
        assert result["confidence"] == 90
        assert result["emotions"] == ["joy"]

    def test_star_payload_may_be_nested(self):
        payload = [[{"label": "2 stars", "score": 0.8}, {"label": "3 stars", "score": 0.2}]]
        result = parse_remote_output(payload, "meh")
        assert result["score"] == 4.4
        assert result["label"] == "neutral"

    def test_low_confidence_star_result_is_neutral(self):
        payload = [
            {"label": "5 stars", "score": 0.34},
            {"label": "4 stars", "score": 0.33},
            {"label": "1 star", "score": 0.33},
        ]
        result = parse_remote_output(payload, "text")
        assert result["confidence"] == 34
        assert result["label"] == "neutral"

    def test_confidence_at_threshold_keeps_star_label(self):
        payload = [
            {"label": "3 stars", "score": 0.35},
            {"label": "5 stars", "score": 0.33},
            {"label": "4 stars", "score": 0.32},
        ]
        result = parse_remote_output(payload, "text")
        assert result["confidence"] == 35
        assert result["label"] == "positive"

    def test_star_confidence_rounds_half_up(self):
        payload = [{"label": "5 stars", "score": 0.625}, {"label": "1 star", "score": 0.375}]
        result = parse_remote_output(payload, "text")
        assert result["confidence"] == 63
        assert result["score"] == 7.0
        assert result["label"] == "positive"

    @pytest.mark.parametrize("score, label", [
        (8.5, "very-positive"),
        (8.49, "positive"),
        (6.5, "positive"),
        (6.49, "neutral"),
        (4.01, "neutral"),
        (4.0, "negative"),
        (2.51, "negative"),
        (2.5, "very-negative"),
    ])
    def test_star_label_boundaries(self, score, label):
        assert _star_label(score) == label

    def test_binary_negative(self):
        result = parse_remote_output([{"label": "NEGATIVE", "score": 0.8}], "I feel sad")
        assert result == {
            "score": 1.0,
            "label": "negative",
            "confidence": 80,
            "emotions": ["sadness"],
        }

    def test_binary_positive(self):
        result = parse_remote_output([[{"label": "POSITIVE", "score": 0.6}]], "ok")
        assert result["score"] == 8.0
        assert result["label"] == "positive"
        assert result["confidence"] == 60

    def test_binary_rounds_half_up(self):
        result = parse_remote_output([{"label": "POSITIVE", "score": 0.625}], "ok")
        assert result["confidence"] == 63
        assert result["score"] == 8.13

    @pytest.mark.parametrize("payload", [
        {"error": "Model is currently loading"},
        [],
        [{"label": "LABEL_0", "score": 0.9}],
        [{"label": "positive", "score": 0.9}],
        [{"label": "POSITIVE"}],
        [{"label": "five stars", "score": 1.0}],
        "not a list",
    ])
    def test_unrecognized_shapes(self, payload):
        with pytest.raises(RemoteUnavailable):
            parse_remote_output(payload, "text")


# =============================================================
# TEST: Remote adapter transport
# =============================================================

class TestRemoteSentiment:

    def test_posts_inputs_with_bearer_token(self, remote_env):
        payload = [{"label": "4 stars", "score": 1.0}]
        with patch.object(sentiment_analyzer.requests, "post", return_value=_response(payload)) as post:
            result = remote_sentiment("Looking forward to the weekend")

        assert result["score"] == 8.0
        _, kwargs = post.call_args
        assert kwargs["json"] == {"inputs": "Looking forward to the weekend"}
        assert kwargs["headers"]["Authorization"] == "Bearer hf_test_token"
        assert kwargs["timeout"] > 0

    def test_missing_token_raises_without_calling(self, monkeypatch):
        monkeypatch.delenv("HUGGINGFACE_API_TOKEN", raising=False)
        monkeypatch.setenv("HUGGINGFACE_API_URL", "https://inference.example.test/models/stars")
        with patch.object(sentiment_analyzer.requests, "post") as post:
            with pytest.raises(RemoteUnavailable):
                remote_sentiment("text")
        post.assert_not_called()

    def test_error_status(self, remote_env):
        with patch.object(sentiment_analyzer.requests, "post", return_value=_response({}, 503)):
            with pytest.raises(RemoteUnavailable):
                remote_sentiment("text")

    def test_timeout(self, remote_env):
        with patch.object(sentiment_analyzer.requests, "post", side_effect=requests.Timeout("slow")):
            with pytest.raises(RemoteUnavailable):
                remote_sentiment("text")

    def test_invalid_json(self, remote_env):
        response = _response(None)
        response.json.side_effect = ValueError("no json")
        with patch.object(sentiment_analyzer.requests, "post", return_value=response):
            with pytest.raises(RemoteUnavailable):
                remote_sentiment("text")


# =============================================================
# TEST: Hybrid orchestrator
# =============================================================

class TestAnalyzeSentiment:

    TEXT = "Exams are stressing me out but I am hopeful"

    def test_uses_remote_result(self):
        remote = {"score": 9.2, "label": "very-positive", "confidence": 90, "emotions": ["joy"]}
        with patch.object(sentiment_analyzer, "remote_sentiment", return_value=remote):
            assert analyze_sentiment(self.TEXT) == remote

    def test_falls_back_when_remote_unavailable(self):
        with patch.object(sentiment_analyzer, "remote_sentiment",
                          side_effect=RemoteUnavailable("down")):
            assert analyze_sentiment(self.TEXT) == rule_based_sentiment(self.TEXT)

    def test_falls_back_on_any_error(self):
        with patch.object(sentiment_analyzer, "remote_sentiment", side_effect=KeyError("label")):
            assert analyze_sentiment(self.TEXT) == rule_based_sentiment(self.TEXT)

    def test_falls_back_when_label_missing(self):
        with patch.object(sentiment_analyzer, "remote_sentiment", return_value={"score": 7}):
            assert analyze_sentiment(self.TEXT) == rule_based_sentiment(self.TEXT)

    def test_calls_remote_once(self):
        with patch.object(sentiment_analyzer, "remote_sentiment",
                          side_effect=RemoteUnavailable("down")) as remote:
            analyze_sentiment(self.TEXT)
        assert remote.call_count == 1

    def test_unconfigured_remote_falls_back(self, monkeypatch):
        monkeypatch.delenv("HUGGINGFACE_API_TOKEN", raising=False)
        assert analyze_sentiment(self.TEXT) == rule_based_sentiment(self.TEXT)

    def test_remote_score_is_clamped(self):
        remote = {"score": 10.4, "label": "very-positive", "confidence": 101, "emotions": []}
        with patch.object(sentiment_analyzer, "remote_sentiment", return_value=remote):
            result = analyze_sentiment(self.TEXT)
        assert result["score"] == 10
        assert result["confidence"] == 100
