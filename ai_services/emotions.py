"""Keyword-based emotion tagging for journal text."""

# Order matters: tags are reported in table order.
EMOTION_KEYWORDS = (
    ('joy', ('happy', 'excited', 'grateful', 'love', 'wonderful', 'amazing', 'smile')),
    ('sadness', ('sad', 'unhappy', 'cry', 'lonely', 'depressed', 'down')),
    ('anger', ('angry', 'mad', 'frustrated', 'annoyed', 'furious')),
    ('fear', ('scared', 'afraid', 'anxious', 'worried', 'terrified')),
    ('surprise', ('surprised', 'amazed', 'shocked', 'astonished')),
    ('trust', ('trust', 'confident', 'believe', 'secure')),
    ('anticipation', ('hopeful', 'eager', 'expect', 'waiting', 'excited')),
)

MAX_EMOTIONS = 3


def extract_emotions(text):
    """
    Tag text with up to three emotions.

    A tag is included when one of its keywords appears as a whole
    whitespace-separated token (no substring matching).

    Args:
        text (str): Free text to tag

    Returns:
        list: Emotion tags in table order
    """
    words = set((text or '').lower().split())
    detected = [
        emotion for emotion, keywords in EMOTION_KEYWORDS
        if any(keyword in words for keyword in keywords)
    ]
    return detected[:MAX_EMOTIONS]
