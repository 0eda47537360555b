from __future__ import annotations

import re
from datetime import UTC, datetime
from uuid import uuid4

_SLUG = re.compile(r"[^a-z0-9]+")


def now_utc() -> datetime:
    return datetime.now(UTC)


def make_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


def slugify(text: str) -> str:
    slug = _SLUG.sub("-", text.lower()).strip("-")
    return slug or "unnamed"


def roster_player_id(team_name: str, player_name: str, roster_index: int) -> str:
    """Stable id for a roster entry that did not bring its own identity."""
    return f"{slugify(team_name)}:{roster_index:02d}:{slugify(player_name)}"
