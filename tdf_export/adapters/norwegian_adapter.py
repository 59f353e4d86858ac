"""Adapter for the Norwegian Google Forms CSV export.

Columns, in order:
    Timestamp, Email Address, Navn, Player-ID, Fødselsår,
    Mobil (Brukes kun ved viktige beskjeder)

Fødselsår is a bare birth year; the mobile column may be missing.
"""

from tdf_export.core.models import BirthDate, PlayerData
from .base import DelimitedAdapter
from .row_tokenizer import split_csv_row


class NorwegianCsvAdapter(DelimitedAdapter):
    """Parse registrations from the Norwegian Google Forms CSV."""

    REQUIRED_HEADERS = ('Timestamp', 'Email Address', 'Navn')
    HEADER_HINT = (
        'CSV header does not match expected format. Please ensure it contains '
        'Timestamp, Email Address, and Navn columns. '
        'Have you tried selecting the Wix format instead?'
    )
    NAME_LABEL = 'Name (Navn)'
    MIN_COLUMNS = 5

    def split_row(self, line: str) -> list[str]:
        return split_csv_row(line)

    def map_row(self, columns: list[str], row_number: int) -> PlayerData:
        self._require_columns(columns, self.MIN_COLUMNS, row_number)
        return PlayerData(
            timestamp=self._cell(columns, 0),
            email=self._cell(columns, 1),
            navn=self._cell(columns, 2),
            player_id=self._cell(columns, 3),
            birth_year=BirthDate.classify(self._cell(columns, 4)),
            mobile=self._cell(columns, 5),
        )
