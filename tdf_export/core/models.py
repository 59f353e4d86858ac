"""Data models for the tournament registration exporter."""

from dataclasses import dataclass, field
from enum import Enum


class BirthDateKind(Enum):
    YEAR = 'year'            # "1990"
    ISO_DATE = 'iso_date'    # "1990-05-17"
    EURO_DATE = 'euro_date'  # "17/05/1990"
    OTHER = 'other'          # anything else, passed through as-is


@dataclass(frozen=True)
class BirthDate:
    """Birth date tagged with the textual shape it arrived in.

    Each source layout delivers a different shape, so the shape is decided
    once when the record is built instead of being sniffed again on output.
    """
    kind: BirthDateKind
    value: str

    @classmethod
    def classify(cls, raw: str) -> 'BirthDate':
        raw = (raw or '').strip()
        if '-' in raw:
            kind = BirthDateKind.ISO_DATE if len(raw.split('-')) == 3 else BirthDateKind.OTHER
            return cls(kind, raw)
        if '/' in raw:
            kind = BirthDateKind.EURO_DATE if len(raw.split('/')) == 3 else BirthDateKind.OTHER
            return cls(kind, raw)
        # Bare year; an empty value lands here too and renders as "02/27/"
        return cls(BirthDateKind.YEAR, raw)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PlayerData:
    """One normalized registration, whatever layout it came from."""
    timestamp: str            # order date / form timestamp, only used for dedup
    email: str
    navn: str                 # full name, "First Last"
    player_id: str            # Pokemon Play! ID, dedup key
    birth_year: BirthDate
    mobile: str = ''          # not present in Wix exports


@dataclass
class TournamentConfig:
    """Organizer and tournament metadata for the generated TDF file."""
    organizer_name: str
    organizer_popid: str
    tournament_name: str = 'August Challenge'
    city: str = 'Update'
    start_date: str | None = None   # MM/DD/YYYY HH:MM:SS, defaults to generation time
    country: str = 'Norway'


SECTION_KEYS = ('deltar', 'venteliste', 'ikke_svart', 'kommer_ikke')


@dataclass
class SpreadsheetParseResult:
    """Players from the "Deltar" section plus the per-section tallies."""
    players: list[PlayerData] = field(default_factory=list)
    total_found: int = 0
    sections: dict = field(default_factory=lambda: {key: 0 for key in SECTION_KEYS})
