"""Caller-side checks applied before any network call."""

from src.models import SIDES, CreateDebateIntent, JoinDebateIntent

MAX_TOPIC_LEN = 100
MAX_DESCRIPTION_LEN = 500


class ValidationError(ValueError):
    """Raised when a request is rejected before reaching the ledger."""


def validate_create(topic: str, description: str) -> CreateDebateIntent:
    """Return a CreateDebateIntent with stripped fields.

    Raises:
        ValidationError: If either field is blank or over its length limit.
    """
    topic = (topic or "").strip()
    description = (description or "").strip()
    if not topic or not description:
        raise ValidationError("Please fill in both topic and description")
    if len(topic) > MAX_TOPIC_LEN:
        raise ValidationError(f"Topic must be at most {MAX_TOPIC_LEN} characters, got {len(topic)}")
    if len(description) > MAX_DESCRIPTION_LEN:
        raise ValidationError(
            f"Description must be at most {MAX_DESCRIPTION_LEN} characters, got {len(description)}"
        )
    return CreateDebateIntent(topic=topic, description=description)


def validate_join(debate_id: str, side: int) -> JoinDebateIntent:
    """Return a JoinDebateIntent.

    Raises:
        ValidationError: If the id is blank or the side is not 0 or 1.
    """
    debate_id = (debate_id or "").strip()
    if not debate_id:
        raise ValidationError("Debate id is required")
    if isinstance(side, bool) or side not in SIDES:
        raise ValidationError(f"Side must be 0 (A) or 1 (B), got {side!r}")
    return JoinDebateIntent(debate_id=debate_id, side=side)
