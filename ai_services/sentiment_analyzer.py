import logging
import math
import os
import re
import requests
from flask import current_app, has_app_context

from ai_services.emotions import extract_emotions

logger = logging.getLogger(__name__)

SENTIMENT_LABELS = ('very-negative', 'negative', 'neutral', 'positive', 'very-positive')

POSITIVE_WORDS = (
    'happy', 'joy', 'excited', 'great', 'wonderful', 'amazing', 'excellent', 'good', 'love',
    'beautiful', 'fantastic', 'awesome', 'perfect', 'blessed', 'grateful', 'thankful', 'proud',
    'succeed', 'success', 'win', 'achieve', 'accomplished', 'better', 'best', 'hope', 'hopeful',
    'confident', 'optimistic', 'peaceful', 'calm', 'relaxed', 'content', 'satisfied', 'delighted',
    'energized', 'motivated', 'productive', 'focused', 'refreshing', 'positive', 'joyful',
)

# Stems, matched as substrings ("worr" catches worried/worrying)
NEGATIVE_WORDS = (
    'sad', 'depressed', 'anxious', 'worr', 'stress', 'stressed', 'angry', 'frustrated', 'upset',
    'hurt', 'pain', 'terrible', 'awful', 'horrible', 'bad', 'worst', 'hate', 'fear', 'scared',
    'lonely', 'alone', 'isolated', 'overwhelm', 'exhaust', 'tired', 'struggling', 'difficult',
    'hard', 'fail', 'failure', 'lost', 'confused', 'disappoint', 'regret', 'guilt', 'shame',
    'drain', 'burn', 'fatigue', 'restless', 'overwork', 'pressure', 'deadline', 'tense', 'stuck',
    'hopeless',
)

NEGATION_WORDS = frozenset([
    'not', 'never', "don't", "doesn't", "isn't", "wasn't", "can't", "won't", 'no', "didn't",
])

EMOTION_STEMS = (
    ('joy', ('happy', 'joy', 'excited', 'delighted', 'cheerful', 'pleased')),
    ('sadness', ('sad', 'depressed', 'unhappy', 'miserable', 'lonely', 'melancholy', 'drain',
                 'tired', 'exhaust')),
    ('anger', ('angry', 'furious', 'mad', 'irritated', 'frustrated', 'annoyed')),
    ('fear', ('scared', 'afraid', 'anxious', 'worried', 'nervous', 'panic')),
    ('stress', ('stressed', 'overwhelm', 'burn', 'pressure', 'deadline')),
    ('trust', ('trust', 'confident', 'secure', 'safe', 'believe')),
    ('anticipation', ('excited', 'eager', 'hopeful', 'anticipate')),
)

ALLOWED_EMOTIONS = frozenset(['joy', 'sadness', 'anger', 'fear', 'trust', 'anticipation', 'stress'])

NEGATION_WINDOW = 2
LOW_CONFIDENCE_THRESHOLD = 35
BINARY_LABELS = ('POSITIVE', 'NEGATIVE')


class RemoteUnavailable(Exception):
    """The remote sentiment model could not produce a usable result."""


def _contains_any(word, stems):
    return any(stem in word for stem in stems)


def _clamp(value, low, high):
    return max(low, min(high, value))


def round_half_up(value, digits=0):
    """Round halves upward (62.5 -> 63, 8.125 -> 8.13)."""
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded


def _tokenize(text):
    # Word characters are ASCII only; accented letters are dropped
    cleaned = re.sub(r"[^A-Za-z0-9_\s']", '', (text or '').lower())
    return cleaned.split()


def _rule_based_label(score):
    if score >= 8:
        return 'very-positive'
    elif score >= 6:
        return 'positive'
    elif score <= 2.5:
        return 'very-negative'
    elif score <= 4.5:
        return 'negative'
    return 'neutral'


def _star_label(score):
    if score >= 8.5:
        return 'very-positive'
    elif score >= 6.5:
        return 'positive'
    elif score <= 2.5:
        return 'very-negative'
    elif score <= 4:
        return 'negative'
    return 'neutral'


def rule_based_sentiment(text):
    """
    Score text offline with positive/negative word stems.

    A negation word flips the polarity of stems found in the two words
    that follow it. Always returns a result.

    Args:
        text (str): The text to analyze

    Returns:
        dict: score (0-10), label, confidence (0-100) and emotions
    """
    words = _tokenize(text)

    positive_count = 0
    negative_count = 0
    detected_emotions = []

    for i, word in enumerate(words):
        if word in NEGATION_WORDS:
            for next_word in words[i + 1:i + 1 + NEGATION_WINDOW]:
                if _contains_any(next_word, POSITIVE_WORDS):
                    negative_count += 1
                if _contains_any(next_word, NEGATIVE_WORDS):
                    positive_count += 1
            continue

        if _contains_any(word, POSITIVE_WORDS):
            positive_count += 1
        if _contains_any(word, NEGATIVE_WORDS):
            negative_count += 1

        for emotion, stems in EMOTION_STEMS:
            if emotion not in detected_emotions and _contains_any(word, stems):
                detected_emotions.append(emotion)

    sentiment_raw = (positive_count - negative_count) / max(len(words) / 6, 1)
    normalized_score = _clamp(5 + sentiment_raw * 4, 0, 10)

    raw_confidence = min(1, abs(sentiment_raw) + (positive_count + negative_count) / 10)
    confidence = _clamp(raw_confidence, 0.4, 0.95)

    return {
        'score': round_half_up(normalized_score, 2),
        'label': _rule_based_label(normalized_score),
        'confidence': round_half_up(confidence * 100),
        'emotions': [e for e in detected_emotions if e in ALLOWED_EMOTIONS][:3],
    }


def _remote_settings():
    """Read the remote model settings from the app config or the environment."""
    if has_app_context():
        config = current_app.config
        return (
            config.get('HUGGINGFACE_API_URL'),
            config.get('HUGGINGFACE_API_TOKEN'),
            config.get('SENTIMENT_API_TIMEOUT', 8),
        )

    model = os.getenv('HUGGINGFACE_MODEL')
    api_url = os.getenv('HUGGINGFACE_API_URL') or (
        f"https://api-inference.huggingface.co/models/{model}" if model else None
    )
    return api_url, os.getenv('HUGGINGFACE_API_TOKEN'), float(os.getenv('SENTIMENT_API_TIMEOUT', 8))


def _star_value(label):
    match = re.match(r'\s*(\d+)', label)
    return int(match.group(1)) if match else None


def _parse_star_output(outputs, text):
    weighted_sum = 0.0
    total = 0.0
    for item in outputs:
        stars = _star_value(item['label'])
        if stars is not None:
            weighted_sum += stars * item['score']
            total += item['score']

    if total <= 0:
        raise RemoteUnavailable('Star rating response carried no usable weights')

    avg_stars = weighted_sum / total
    scaled_score = avg_stars * 2
    confidence = round_half_up(max(item['score'] for item in outputs) * 100)

    label = _star_label(scaled_score)
    if confidence < LOW_CONFIDENCE_THRESHOLD:
        label = 'neutral'

    return {
        'score': round_half_up(scaled_score, 2),
        'label': label,
        'confidence': confidence,
        'emotions': extract_emotions(text),
    }


def _parse_binary_output(outputs, text):
    top = outputs[0]
    score = top['score']
    scaled_score = 5 + score * 5 if top['label'] == 'POSITIVE' else 5 - score * 5

    return {
        'score': round_half_up(scaled_score, 2),
        'label': top['label'].lower(),
        'confidence': round_half_up(score * 100),
        'emotions': extract_emotions(text),
    }


def parse_remote_output(data, text):
    """
    Normalize a text-classification response into a sentiment result.

    Understands star-rating models ("1 star" .. "5 stars") and binary
    POSITIVE/NEGATIVE models. Responses may be wrapped in an outer list.

    Raises:
        RemoteUnavailable: If the payload matches neither shape
    """
    outputs = data[0] if isinstance(data, list) and data and isinstance(data[0], list) else data

    if not isinstance(outputs, list) or not outputs:
        raise RemoteUnavailable('Unexpected response format')

    for item in outputs:
        if (not isinstance(item, dict)
                or not isinstance(item.get('label'), str)
                or not isinstance(item.get('score'), (int, float))):
            raise RemoteUnavailable('Unexpected response format')

    if 'star' in outputs[0]['label']:
        return _parse_star_output(outputs, text)

    if outputs[0]['label'] in BINARY_LABELS:
        return _parse_binary_output(outputs, text)

    raise RemoteUnavailable(f"Unrecognized label {outputs[0]['label']!r}")


def remote_sentiment(text):
    """
    Analyze sentiment with the hosted text-classification model.

    Raises:
        RemoteUnavailable: On missing configuration, transport errors,
            non-success status or an unrecognized payload
    """
    api_url, api_token, timeout = _remote_settings()

    if not api_url or not api_token:
        raise RemoteUnavailable('Remote sentiment model is not configured')

    headers = {
        'Authorization': f'Bearer {api_token}',
        'Content-Type': 'application/json',
    }

    try:
        response = requests.post(api_url, headers=headers, json={'inputs': text}, timeout=timeout)
    except requests.RequestException as e:
        raise RemoteUnavailable(f'Request failed: {e}') from e

    if not response.ok:
        logger.warning(f"Sentiment API error {response.status_code}: {response.text[:200]}")
        raise RemoteUnavailable(f'Sentiment API error: {response.status_code}')

    try:
        data = response.json()
    except ValueError as e:
        raise RemoteUnavailable('Sentiment API returned invalid JSON') from e

    return parse_remote_output(data, text)


def _normalize_result(result):
    return {
        'score': round_half_up(_clamp(float(result['score']), 0, 10), 2),
        'label': result['label'],
        'confidence': int(_clamp(result.get('confidence', 0), 0, 100)),
        'emotions': list(result.get('emotions') or [])[:3],
    }


def analyze_sentiment(text):
    """
    Analyze the sentiment of the given text.

    Tries the remote model once and falls back to the rule-based scorer
    when it is unavailable or returns something unusable. Never raises.

    Args:
        text (str): The text to analyze

    Returns:
        dict: Dictionary containing score, label, confidence and emotions
    """
    try:
        result = remote_sentiment(text)
    except RemoteUnavailable as e:
        logger.info(f"Remote sentiment unavailable, using rule-based fallback: {e}")
        return rule_based_sentiment(text)
    except Exception as e:
        logger.warning(f"Remote sentiment failed, using rule-based fallback: {e}", exc_info=True)
        return rule_based_sentiment(text)

    if not result or result.get('label') not in SENTIMENT_LABELS:
        logger.warning("Invalid remote sentiment result, using rule-based fallback")
        return rule_based_sentiment(text)

    logger.debug(f"Using remote sentiment result: {result}")
    return _normalize_result(result)
