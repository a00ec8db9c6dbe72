"""
Confidence Decay Job - linear forgetting of unread notes.

Run once per period (e.g. daily from cron via POST /decay). Each run
lowers every note's confidence by rate * idle days, never below 0.1 and
never upward, and writes all changes in one batch.
"""

import hmac
from datetime import datetime, timedelta

from src.core.note_store.base import NoteStore
from src.models.decay import DecayReport
from src.models.note import DEFAULT_CONFIDENCE, MIN_CONFIDENCE, Note
from src.utils.exceptions import UnauthorizedError
from src.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_DECAY_RATE = 0.015
ONE_DAY = timedelta(days=1)


def reference_time(note: Note) -> datetime | None:
    """
    Instant from which idle time is measured.

    Last access (else update, else creation), moved forward to the last
    decay so time already charged is not charged again.
    """
    touched = note.last_touched()
    if touched is None:
        return note.decayed_at
    if note.decayed_at is not None and note.decayed_at > touched:
        return note.decayed_at
    return touched


def next_confidence(note: Note, now: datetime, rate: float) -> float | None:
    """
    Decayed confidence for a note, or None when it should not change.

    Args:
        note: Note to evaluate
        now: Time of the run
        rate: Confidence lost per idle day

    Returns:
        New confidence, or None if idle time is not positive or the
        result would not be lower than the current value
    """
    reference = reference_time(note)
    if reference is None:
        return None

    elapsed_days = (now - reference) / ONE_DAY
    if elapsed_days <= 0:
        return None

    current = note.confidence if note.confidence is not None else DEFAULT_CONFIDENCE
    decayed = current - elapsed_days * rate
    candidate = max(MIN_CONFIDENCE, round(decayed, 4))

    if candidate >= current:
        return None
    return candidate


class ConfidenceDecayJob:
    """
    Batch decay of note confidence.

    Concurrent runs are not coordinated; the store's per-write atomicity
    is the only guard.
    """

    def __init__(self, store: NoteStore, rate_per_day: float = DEFAULT_DECAY_RATE, secret: str | None = None):
        """
        Initialize decay job.

        Args:
            store: Note store
            rate_per_day: Confidence lost per idle day
            secret: Optional shared secret required to trigger a run
        """
        self.store = store
        self.rate_per_day = rate_per_day
        self.secret = secret

    def authorize(self, provided: str | None) -> None:
        """
        Check the trigger secret.

        Without a configured secret every caller is accepted.

        Raises:
            UnauthorizedError: If a secret is configured and does not match
        """
        if not self.secret:
            return
        if provided is None or not hmac.compare_digest(provided.encode(), self.secret.encode()):
            logger.warning("Rejected decay trigger with missing or wrong secret")
            raise UnauthorizedError("Unauthorized")

    async def run(self, now: datetime | None = None) -> DecayReport:
        """
        Decay every note once.

        Args:
            now: Time of the run (defaults to now)

        Returns:
            DecayReport with processed/updated counts and the rate used
        """
        now = now or datetime.now()
        notes = await self.store.all_notes()

        updates: dict[str, tuple[float, datetime]] = {}
        for note in notes:
            confidence = next_confidence(note, now, self.rate_per_day)
            if confidence is not None and note.id:
                updates[note.id] = (confidence, now)

        if updates:
            await self.store.bulk_update_confidence(updates)

        logger.info(
            f"Decay run: processed={len(notes)} updated={len(updates)} rate={self.rate_per_day}"
        )
        return DecayReport(processed=len(notes), updated=len(updates), decay_rate=self.rate_per_day)
