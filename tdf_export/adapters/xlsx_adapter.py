"""Adapter for sectioned Spond-style XLSX attendance exports.

The sheet is split into sections, each introduced by a marker row such as
"Deltar (42)". A header row ("Navn", ..., "E-post", ...) names the columns;
only rows in the "Deltar" (attending) section become players. Rows that do
not look like a player are skipped silently instead of failing the file.
"""

import datetime
import re
import zipfile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from tdf_export.core.models import BirthDate, PlayerData, SpreadsheetParseResult
from .base import BaseAdapter, RegistrationFormatError


# (label in the sheet, key in SpreadsheetParseResult.sections)
SECTION_MARKERS = [
    ('Deltar', 'deltar'),              # attending
    ('Venteliste', 'venteliste'),      # waitlist
    ('Ikke svart', 'ikke_svart'),      # no response
    ('Kommer ikke', 'kommer_ikke'),    # not attending
]
ATTENDING_SECTION = 'deltar'

NAME_HEADER = 'Navn'
EMAIL_HEADER = 'E-post'
PLAYER_ID_HEADER = 'Spiller ID'
BIRTH_DATE_HEADER = 'Fødselsdato'
MOBILE_HEADER = 'Mobilnummer'


class XlsxAdapter(BaseAdapter):
    """Parse attending players from a grid of string cells."""

    def load(self, data_path: str) -> list[list[str]]:
        """Read the first worksheet into rows of display strings."""
        try:
            workbook = load_workbook(data_path, read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
            raise RegistrationFormatError(f'Failed to parse XLSX file: {e}') from e

        try:
            sheet = workbook.worksheets[0]
            return [[self._cell_text(v) for v in row]
                    for row in sheet.iter_rows(values_only=True)]
        finally:
            workbook.close()

    def parse(self, data: list[list[str]],
              now: datetime.datetime | None = None) -> SpreadsheetParseResult:
        """Walk the grid, tracking the current section and header row.

        Args:
            data: Rows of cell strings, empty string for blank cells.
            now: Timestamp stamped on every player (the sheet has none).
                 Defaults to the current UTC time.
        """
        if now is None:
            now = datetime.datetime.now(datetime.timezone.utc)
        timestamp = now.isoformat()

        result = SpreadsheetParseResult()
        current_section = ''
        header_columns = None

        for row in data:
            first_cell = self._first_cell(row)

            section = self._match_section(first_cell)
            if section is not None:
                current_section, count = section
                if count is not None:
                    result.sections[current_section] = count
                continue

            if first_cell == NAME_HEADER and any(EMAIL_HEADER in str(c or '') for c in row):
                header_columns = [str(c or '').strip() for c in row]
                continue

            if header_columns is None or current_section != ATTENDING_SECTION:
                continue

            if not first_cell or all(not str(c or '').strip() for c in row):
                continue

            player = self._parse_player_row(row, header_columns, timestamp)
            if player:
                result.players.append(player)

        result.total_found = len(result.players)
        return result

    @staticmethod
    def _match_section(first_cell: str):
        """Return (section_key, count or None) for a marker row, else None."""
        for label, key in SECTION_MARKERS:
            if f'{label} (' in first_cell:
                match = re.search(rf'{label} \((\d+)\)', first_cell)
                return key, int(match.group(1)) if match else None
        return None

    def _parse_player_row(self, row: list[str], headers: list[str],
                          timestamp: str) -> PlayerData | None:
        def get_value(header_name: str) -> str:
            for index, header in enumerate(headers):
                if header_name in header:
                    return str(row[index] or '').strip() if index < len(row) else ''
            return ''

        navn = get_value(NAME_HEADER)
        email = get_value(EMAIL_HEADER)
        player_id = get_value(PLAYER_ID_HEADER)
        birth_date = get_value(BIRTH_DATE_HEADER)
        mobile = get_value(MOBILE_HEADER)

        if not navn or (not email and not player_id):
            return None

        # Parent/guardian rows carry an email but no player ID
        if not player_id and email:
            return None

        return PlayerData(
            timestamp=timestamp,
            email=email,
            navn=navn,
            player_id=player_id,
            birth_year=BirthDate.classify(self._format_birth_date(birth_date)),
            mobile=mobile,
        )

    @staticmethod
    def _format_birth_date(raw: str) -> str:
        """DD/MM/YYYY -> YYYY-MM-DD; anything else is returned unchanged."""
        if '/' in raw:
            parts = raw.split('/')
            if len(parts) == 3:
                day, month, year = parts
                return f'{year}-{month.zfill(2)}-{day.zfill(2)}'
        return raw

    @staticmethod
    def _first_cell(row: list[str]) -> str:
        if not row or row[0] is None:
            return ''
        return str(row[0]).strip()

    @staticmethod
    def _cell_text(value) -> str:
        """Render a cell the way the sheet displays it (Norwegian locale).

        Only plain date cells (Fødselsdato) are expected; a datetime loses its
        time part and booleans come out as 'True'/'False'.
        """
        if value is None:
            return ''
        if isinstance(value, (datetime.datetime, datetime.date)):
            return value.strftime('%d/%m/%Y')
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
