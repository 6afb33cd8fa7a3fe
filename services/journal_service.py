"""
Journal persistence.

Every write that touches journal content goes through here so the stored
sentiment always matches the current text.
"""
import logging
from extensions import db
from models.journal import JournalEntry
from ai_services.sentiment_analyzer import analyze_sentiment

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('title', 'tags', 'mood', 'is_private', 'is_pinned')


def _clean_mood(mood):
    mood = (mood or '').strip()
    return mood or None


def create_entry(user_id, data):
    """
    Create a journal entry and analyze its content once.

    Args:
        user_id: Owner of the entry
        data (dict): title, content and optional tags, mood, is_private

    Returns:
        JournalEntry: The persisted entry
    """
    content = data['content'].strip()

    entry = JournalEntry(
        title=data['title'].strip(),
        content=content,
        user_id=user_id,
        tags=data.get('tags') or [],
        mood=_clean_mood(data.get('mood')),
        is_private=data.get('is_private', True),
    )
    entry.apply_sentiment(analyze_sentiment(content))

    db.session.add(entry)
    db.session.commit()

    logger.info(f"Journal entry {entry.id} created for user {user_id} ({entry.sentiment_label})")
    return entry


def update_entry(entry_id, user_id, patch):
    """
    Apply a partial update to a user's entry.

    Sentiment is recomputed only when the content actually changes.

    Returns:
        JournalEntry or None: None when the user owns no such entry
    """
    entry = JournalEntry.find_by_id(entry_id, user_id)
    if entry is None:
        return None

    content = (patch.get('content') or '').strip()
    if content and content != entry.content:
        entry.content = content
        entry.apply_sentiment(analyze_sentiment(content))

    for field in UPDATABLE_FIELDS:
        if field not in patch:
            continue
        value = patch[field]
        if field == 'title':
            value = (value or '').strip()
            if not value:
                continue
        elif field == 'mood':
            value = _clean_mood(value)
            if value is None:
                continue
        setattr(entry, field, value)

    db.session.commit()
    return entry


def delete_entry(entry_id, user_id):
    """Delete a user's entry. Returns False when there was nothing to delete."""
    entry = JournalEntry.find_by_id(entry_id, user_id)
    if entry is None:
        return False

    db.session.delete(entry)
    db.session.commit()
    return True


def refresh_entries(user_id):
    """Re-run sentiment analysis on every entry of the user, one at a time."""
    entries = JournalEntry.find_by_user(user_id)

    for entry in entries:
        entry.apply_sentiment(analyze_sentiment(entry.content))
        db.session.commit()

    logger.info(f"Refreshed sentiment for {len(entries)} journal entries of user {user_id}")
    return entries
