"""Prefixed ID generation for stored calls, jobs and events."""

import uuid


def generate_id(prefix: str, length: int = 16) -> str:
    """Return `prefix` followed by `length` random hex characters, e.g. "whc_a1b2c3d4e5f6a7b8"."""
    return f"{prefix}{uuid.uuid4().hex[:length]}"
