"""Base adapters for parsing tournament registration exports."""

from abc import ABC, abstractmethod

from tdf_export.core.deduplicator import deduplicate
from tdf_export.core.models import PlayerData


class RegistrationFormatError(ValueError):
    """An export does not match the layout its adapter expects.

    `row` is the 1-based line number in the file (header is row 1) when a
    single row is at fault, otherwise None.
    """

    def __init__(self, message: str, row: int | None = None):
        super().__init__(message)
        self.row = row


class BaseAdapter(ABC):
    @abstractmethod
    def load(self, data_path: str):
        """Read a file into the raw input `parse` expects."""
        pass

    @abstractmethod
    def parse(self, data):
        """Parse raw export data into normalized players."""
        pass

    def parse_file(self, data_path: str):
        return self.parse(self.load(data_path))


class DelimitedAdapter(BaseAdapter):
    """Shared pipeline for line-based text exports.

    header check -> per-row split and map -> validate -> deduplicate.
    Subclasses set REQUIRED_HEADERS / HEADER_HINT and implement
    `split_row` and `map_row`. Any bad row aborts the whole parse.
    """

    REQUIRED_HEADERS: tuple = ()
    HEADER_HINT = ''
    NAME_LABEL = 'Name'

    def load(self, data_path: str) -> str:
        # utf-8-sig drops the BOM spreadsheet programs put on CSV exports
        try:
            with open(data_path, 'r', encoding='utf-8-sig') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise RegistrationFormatError(f'Failed to read {data_path}: {e}') from e

    def parse(self, data: str) -> list[PlayerData]:
        """Parse an export and return deduplicated players."""
        # Only line breaks are stripped; a trailing tab is an empty last column
        lines = data.strip('\r\n').split('\n')
        if len(lines) < 2:
            raise RegistrationFormatError('CSV must contain at least a header and one data row')

        header = lines[0]
        if not all(label in header for label in self.REQUIRED_HEADERS):
            raise RegistrationFormatError(self.HEADER_HINT)

        data_rows = [line for line in lines[1:] if line.strip()]
        players = []
        for i, line in enumerate(data_rows):
            row_number = i + 2
            player = self.map_row(self.split_row(line), row_number)
            self._validate(player, row_number)
            players.append(player)

        return deduplicate(players)

    @abstractmethod
    def split_row(self, line: str) -> list[str]:
        pass

    @abstractmethod
    def map_row(self, columns: list[str], row_number: int) -> PlayerData:
        """Map one split row to a PlayerData, raising on too few columns."""
        pass

    def _validate(self, player: PlayerData, row_number: int):
        if '@' not in player.email:
            raise RegistrationFormatError(
                f'Row {row_number}: Invalid email address "{player.email}"', row=row_number)
        if not player.navn:
            raise RegistrationFormatError(
                f'Row {row_number}: {self.NAME_LABEL} is required', row=row_number)
        if not player.player_id:
            raise RegistrationFormatError(
                f'Row {row_number}: Player ID is required', row=row_number)

    @staticmethod
    def _require_columns(columns: list[str], minimum: int, row_number: int):
        if len(columns) < minimum:
            raise RegistrationFormatError(
                f'Row {row_number} does not have enough columns. '
                f'Expected at least {minimum}, got {len(columns)}',
                row=row_number)

    @staticmethod
    def _cell(columns: list[str], index: int) -> str:
        if index < len(columns):
            return columns[index].strip()
        return ''
