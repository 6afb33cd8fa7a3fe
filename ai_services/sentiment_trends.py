"""
Journal sentiment aggregation.

Builds the trend, distribution and negative-streak alert shown on the
journal insights screen from sentiment already stored on each entry.
Nothing here re-runs the analyzer.
"""
from typing import Dict, List, Optional

from ai_services.sentiment_analyzer import SENTIMENT_LABELS, round_half_up

TREND_WINDOW = 30
NEGATIVE_STREAK_THRESHOLD = 5

STREAK_ALERT_MESSAGE = f"{NEGATIVE_STREAK_THRESHOLD} consecutive negative sentiments detected."

STREAK_RECOMMENDATIONS = [
    "Consider talking to a counselor or therapist.",
    "Try journaling your thoughts and emotions daily.",
    "Engage in relaxing activities: meditation, yoga, or a walk.",
    "Reach out to friends or family for support.",
    "Review your recent stressors and create an action plan.",
]


def average_label(avg_score: float) -> str:
    """Map an average 0-10 score onto the five sentiment labels."""
    if avg_score >= 7:
        return 'very-positive'
    elif avg_score >= 5.5:
        return 'positive'
    elif avg_score <= 2:
        return 'very-negative'
    elif avg_score <= 4.5:
        return 'negative'
    return 'neutral'


def sentiment_distribution(entries) -> Dict[str, int]:
    """Count entries per label; every label is present."""
    distribution = {label: 0 for label in reversed(SENTIMENT_LABELS)}
    for entry in entries:
        if entry.sentiment_label in distribution:
            distribution[entry.sentiment_label] += 1
    return distribution


def detect_negative_streak(entries, threshold: int = NEGATIVE_STREAK_THRESHOLD) -> bool:
    """
    Scan entries oldest first for a run of negative-family labels.

    Stops at the first run reaching the threshold.
    """
    consecutive = 0
    for entry in entries:
        if 'negative' in (entry.sentiment_label or ''):
            consecutive += 1
            if consecutive >= threshold:
                return True
        else:
            consecutive = 0
    return False


def build_sentiment_stats(entries) -> Dict:
    """
    Aggregate stored sentiment for a user's journal window.

    Args:
        entries: Journal entries ordered oldest first, already limited
            to the trend window

    Returns:
        dict: trend, average, distribution and streak alert
    """
    entries = list(entries)

    sentiment_trend: List[Dict] = [
        {
            'date': entry.created_at,
            'score': entry.sentiment_score,
            'label': entry.sentiment_label,
        }
        for entry in entries
    ]

    avg_numeric = (
        sum(entry.sentiment_score or 0 for entry in entries) / len(entries)
        if entries else 0
    )

    alert_triggered = detect_negative_streak(entries)
    alert: Optional[str] = STREAK_ALERT_MESSAGE if alert_triggered else None

    return {
        'sentiment_trend': sentiment_trend,
        'avg_sentiment': round_half_up(avg_numeric, 2),
        'avg_label': average_label(avg_numeric) if entries else 'neutral',
        'sentiment_distribution': sentiment_distribution(entries),
        'total_entries': len(entries),
        'alert_triggered': alert_triggered,
        'alert': alert,
        'recommendations': list(STREAK_RECOMMENDATIONS) if alert_triggered else [],
    }
