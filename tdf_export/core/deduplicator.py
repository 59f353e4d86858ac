"""Collapse repeated registrations for the same player.

A player who submits the form twice (or places two orders) shows up once,
with the most recent entry. Position in the output is fixed the first time
a player ID is seen; later entries only replace the record in place.
"""

import datetime

from .models import PlayerData


# Timestamp layouts seen in the exports, tried after ISO 8601
TIMESTAMP_FORMATS = [
    '%Y/%m/%d %H:%M:%S',      # Google Forms: 2024/08/01 14:03:22
    '%Y/%m/%d %I:%M:%S %p',
    '%m/%d/%Y %H:%M:%S',
    '%m/%d/%Y %H:%M',
    '%m/%d/%Y',
    '%d.%m.%Y %H:%M:%S',      # Norwegian locale: 01.08.2024 14:03:22
    '%d.%m.%Y %H:%M',
    '%d.%m.%Y',
    '%b %d, %Y %I:%M %p',     # Wix: Aug 1, 2024 2:03 PM
    '%b %d, %Y %H:%M',
    '%b %d, %Y',
]


def parse_timestamp(raw: str) -> datetime.datetime | None:
    """Best-effort parse of a recency marker. Returns None if unparseable."""
    s = (raw or '').strip()
    if not s:
        return None

    parsed = None
    try:
        parsed = datetime.datetime.fromisoformat(s.replace('Z', '+00:00'))
    except ValueError:
        for fmt in TIMESTAMP_FORMATS:
            try:
                parsed = datetime.datetime.strptime(s, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    # Compare aware timestamps in UTC, naive ones as given
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return parsed


def is_more_recent(incoming: str, retained: str) -> bool:
    """True if `incoming` should replace `retained`.

    When either timestamp cannot be parsed the incoming record wins, so a
    later row in the file takes precedence.
    """
    incoming_dt = parse_timestamp(incoming)
    retained_dt = parse_timestamp(retained)
    if incoming_dt is None or retained_dt is None:
        return True
    return incoming_dt > retained_dt


def deduplicate(players: list[PlayerData]) -> list[PlayerData]:
    """Keep one record per player_id, the most recent by timestamp."""
    by_id: dict[str, PlayerData] = {}
    for player in players:
        existing = by_id.get(player.player_id)
        if existing is None or is_more_recent(player.timestamp, existing.timestamp):
            by_id[player.player_id] = player
    return list(by_id.values())
