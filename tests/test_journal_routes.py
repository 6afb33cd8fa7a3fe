"""Tests for the journal API: CRUD, sentiment refresh and stats."""

from unittest.mock import patch

from ai_services.sentiment_analyzer import rule_based_sentiment
from conftest import register

HAPPY = "I am happy and grateful for my friends"
AWFUL = "I failed my exam and feel terrible and hopeless"


def create(client, content=HAPPY, title="Today", **extra):
    return client.post("/api/journal/", json={"title": title, "content": content, **extra})


class TestCreateJournal:

    def test_requires_login(self, client):
        response = create(client)
        assert response.status_code == 401

    def test_create_analyzes_content(self, client, student):
        response = create(client, tags=["exam", "week 3"], mood="happy")
        assert response.status_code == 201

        journal = response.get_json()["journal"]
        expected = rule_based_sentiment(HAPPY)
        assert journal["sentiment"] == {
            "score": expected["score"],
            "label": expected["label"],
            "confidence": expected["confidence"],
        }
        assert journal["emotions"] == expected["emotions"]
        assert journal["tags"] == ["exam", "week 3"]
        assert journal["mood"] == "happy"
        assert journal["is_private"] is True
        assert journal["is_pinned"] is False

    def test_missing_content_is_rejected_without_analysis(self, client, student):
        with patch("services.journal_service.analyze_sentiment") as analyze:
            response = client.post("/api/journal/", json={"title": "No body"})
        assert response.status_code == 400
        assert "content" in response.get_json()["errors"]
        analyze.assert_not_called()

    def test_missing_title_is_rejected(self, client, student):
        response = client.post("/api/journal/", json={"content": HAPPY})
        assert response.status_code == 400
        assert "title" in response.get_json()["errors"]

    def test_non_string_title_is_rejected(self, client, student):
        response = client.post("/api/journal/", json={"title": 123, "content": HAPPY})
        assert response.status_code == 400
        assert "title" in response.get_json()["errors"]

    def test_tag_list_items_are_not_split(self, client, student):
        journal = create(client, tags=["exam, finals", "exam, finals"]).get_json()["journal"]
        assert journal["tags"] == ["exam, finals"]

    def test_tag_string_is_split_on_commas(self, client, student):
        journal = create(client, tags="exam, finals, ,exam").get_json()["journal"]
        assert journal["tags"] == ["exam", "finals"]

    def test_content_too_long(self, client, student):
        response = create(client, content="a" * 5001)
        assert response.status_code == 400

    def test_invalid_mood(self, client, student):
        response = create(client, mood="ecstatic")
        assert response.status_code == 400


class TestReadUpdateDelete:

    def test_list_pinned_first_then_newest(self, client, student):
        first = create(client, title="first").get_json()["journal"]
        create(client, title="second")
        create(client, title="third")
        client.put(f"/api/journal/{first['id']}", json={"is_pinned": True})

        titles = [j["title"] for j in client.get("/api/journal/").get_json()]
        assert titles == ["first", "third", "second"]

    def test_get_single(self, client, student):
        entry = create(client).get_json()["journal"]
        response = client.get(f"/api/journal/{entry['id']}")
        assert response.status_code == 200
        assert response.get_json()["title"] == "Today"

    def test_other_users_entry_is_not_found(self, app, client, student):
        entry = create(client).get_json()["journal"]

        other = app.test_client()
        register(other, email="other@example.edu")
        assert other.get(f"/api/journal/{entry['id']}").status_code == 404
        assert other.put(f"/api/journal/{entry['id']}", json={"title": "x"}).status_code == 404
        assert other.delete(f"/api/journal/{entry['id']}").status_code == 404

    def test_content_change_reanalyzes(self, client, student):
        entry = create(client).get_json()["journal"]

        with patch("services.journal_service.analyze_sentiment",
                   wraps=rule_based_sentiment) as analyze:
            response = client.put(f"/api/journal/{entry['id']}", json={"content": AWFUL})

        analyze.assert_called_once_with(AWFUL)
        journal = response.get_json()["journal"]
        assert journal["content"] == AWFUL
        assert journal["sentiment"]["label"] in ("negative", "very-negative")
        assert journal["sentiment"]["score"] < 5

    def test_metadata_change_keeps_sentiment(self, client, student):
        entry = create(client).get_json()["journal"]

        with patch("services.journal_service.analyze_sentiment") as analyze:
            response = client.put(f"/api/journal/{entry['id']}",
                                  json={"title": "Renamed", "content": HAPPY, "is_private": False})

        analyze.assert_not_called()
        journal = response.get_json()["journal"]
        assert journal["title"] == "Renamed"
        assert journal["is_private"] is False
        assert journal["sentiment"] == entry["sentiment"]

    def test_delete(self, client, student):
        entry = create(client).get_json()["journal"]
        assert client.delete(f"/api/journal/{entry['id']}").status_code == 200
        assert client.get(f"/api/journal/{entry['id']}").status_code == 404
        assert client.delete(f"/api/journal/{entry['id']}").status_code == 404

    def test_refresh_reanalyzes_every_entry(self, client, student):
        create(client, title="one")
        create(client, title="two", content=AWFUL)

        fixed = {"score": 6.5, "label": "positive", "confidence": 70, "emotions": ["trust"]}
        with patch("services.journal_service.analyze_sentiment", return_value=fixed) as analyze:
            journals = client.get("/api/journal/?refresh=true").get_json()

        assert analyze.call_count == 2
        assert all(j["sentiment"]["label"] == "positive" for j in journals)
        assert all(j["emotions"] == ["trust"] for j in journals)

    def test_plain_listing_does_not_reanalyze(self, client, student):
        create(client)
        with patch("services.journal_service.analyze_sentiment") as analyze:
            client.get("/api/journal/")
        analyze.assert_not_called()


class TestSentimentStats:

    def test_empty(self, client, student):
        stats = client.get("/api/journal/stats/sentiment").get_json()
        assert stats["total_entries"] == 0
        assert stats["sentiment_trend"] == []
        assert stats["alert"] is None

    def test_negative_streak_alert(self, client, student):
        create(client, content=HAPPY)
        for _ in range(5):
            create(client, content=AWFUL)

        stats = client.get("/api/journal/stats/sentiment").get_json()
        assert stats["alert_triggered"] is True
        assert len(stats["recommendations"]) == 5
        assert stats["sentiment_trend"][0]["label"] == rule_based_sentiment(HAPPY)["label"]
        assert stats["total_entries"] == 6
        assert sum(stats["sentiment_distribution"].values()) == 6

    def test_window_is_most_recent_thirty(self, client, student):
        for _ in range(5):
            create(client, content=AWFUL)
        for _ in range(30):
            create(client, content=HAPPY)

        stats = client.get("/api/journal/stats/sentiment").get_json()
        assert stats["total_entries"] == 30
        assert stats["alert_triggered"] is False
        assert sum(stats["sentiment_distribution"].values()) == 30
        happy_label = rule_based_sentiment(HAPPY)["label"]
        assert all(point["label"] == happy_label for point in stats["sentiment_trend"])
