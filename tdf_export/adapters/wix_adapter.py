"""Adapter for Wix event order exports (tab separated).

Relevant columns by position:
    1  Order date
    2  Guest first name
    3  Guest last name
    4  Email
    17 Player ID
    18 Birthday (YYYY-MM-DD)

Only the birth year is kept. Wix has no mobile column.
"""

from tdf_export.core.models import BirthDate, PlayerData
from .base import DelimitedAdapter


class WixAdapter(DelimitedAdapter):
    """Parse registrations from a Wix order export."""

    REQUIRED_HEADERS = ('Order date', 'Email', 'Player ID')
    HEADER_HINT = (
        'CSV header does not match expected Wix format. Please ensure it contains '
        'Order date, Email, and Player ID columns. '
        'Have you tried selecting the Google Forms format instead?'
    )
    MIN_COLUMNS = 19

    ORDER_DATE_COL = 1
    FIRST_NAME_COL = 2
    LAST_NAME_COL = 3
    EMAIL_COL = 4
    PLAYER_ID_COL = 17
    BIRTHDAY_COL = 18

    def split_row(self, line: str) -> list[str]:
        return line.split('\t')

    def map_row(self, columns: list[str], row_number: int) -> PlayerData:
        self._require_columns(columns, self.MIN_COLUMNS, row_number)

        first_name = self._cell(columns, self.FIRST_NAME_COL)
        last_name = self._cell(columns, self.LAST_NAME_COL)
        birthday = self._cell(columns, self.BIRTHDAY_COL)
        birth_year = birthday.split('-')[0] if birthday else ''

        return PlayerData(
            timestamp=self._cell(columns, self.ORDER_DATE_COL),
            email=self._cell(columns, self.EMAIL_COL),
            navn=f'{first_name} {last_name}'.strip(),
            player_id=self._cell(columns, self.PLAYER_ID_COL),
            birth_year=BirthDate.classify(birth_year),
            mobile='',
        )
