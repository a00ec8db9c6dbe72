"""
ID generation utilities for MnemoNotes.

Notes get opaque store-assigned IDs in the form note_xxx.
"""

from uuid import uuid4


def generate_note_id() -> str:
    """
    Generate unique Note ID.

    Returns:
        ID in format "note_xxx" where xxx is 12 hex characters
    """
    return f"note_{uuid4().hex[:12]}"
