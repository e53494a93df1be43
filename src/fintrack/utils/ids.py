"""Identifier generation."""

import uuid


def new_id(prefix: str = "") -> str:
    """Return a collision-free identifier, optionally prefixed (e.g. ``budget_``)."""
    token = uuid.uuid4().hex[:12]
    return f"{prefix}{token}" if prefix else token
