"""End-to-end tests for the build_tdf CLI and XLSX loading."""

import datetime
import os
import sys
import pytest
from openpyxl import Workbook

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tdf_export.build_tdf import get_adapter, load_players, main
from tdf_export.adapters.base import RegistrationFormatError
from tdf_export.adapters.xlsx_adapter import XlsxAdapter

REFERENCE_DIR = os.path.join(PROJECT_ROOT, 'tests', 'reference_data')
NORWEGIAN_CSV = os.path.join(REFERENCE_DIR, 'norwegian_registrations.csv')
WIX_TSV = os.path.join(REFERENCE_DIR, 'wix_orders.tsv')


@pytest.fixture
def spond_xlsx(tmp_path):
    """A small sectioned export written the way Spond lays it out."""
    wb = Workbook()
    ws = wb.active
    ws.append(['August Challenge'])
    ws.append(['Deltar (2)'])
    ws.append(['Navn', 'E-post', 'Spiller ID', 'Fødselsdato', 'Mobilnummer'])
    ws.append(['Ola Nordmann', None, 1111111, datetime.datetime(2010, 3, 5), 91234567])
    ws.append(['Kari Nordmann', 'kari@example.no', '2222222', '9/1/2012', None])
    ws.append(['Forelder Nordmann', 'forelder@example.no', None, None, None])
    ws.append([None])
    ws.append(['Venteliste (1)'])
    ws.append(['Per Hansen', 'per@example.no', '3333333', '01/01/2011', None])
    path = tmp_path / 'spond_export.xlsx'
    wb.save(path)
    return str(path)


def cli_args(source, data, output, *extra):
    return ['--source', source, '--data', *data,
            '--organizer-name', 'Oslo Pokemon Liga', '--organizer-popid', '1234567',
            '--output', output, *extra]


class TestXlsxLoad:
    def test_datetime_cell_keeps_date_only(self):
        assert XlsxAdapter._cell_text(datetime.datetime(2010, 3, 5, 13, 45)) == '05/03/2010'

    def test_load_renders_cells_as_text(self, spond_xlsx):
        grid = XlsxAdapter().load(spond_xlsx)
        ola = grid[3]
        assert ola[:5] == ['Ola Nordmann', '', '1111111', '05/03/2010', '91234567']

    def test_parse_file(self, spond_xlsx):
        result = XlsxAdapter().parse_file(spond_xlsx)
        assert [p.player_id for p in result.players] == ['1111111', '2222222']
        assert result.players[0].birth_year.value == '2010-03-05'
        assert result.players[1].birth_year.value == '2012-01-09'
        assert result.sections['deltar'] == 2
        assert result.sections['venteliste'] == 1

    def test_not_a_workbook(self, tmp_path):
        bogus = tmp_path / 'bogus.xlsx'
        bogus.write_text('Navn,E-post\n')
        with pytest.raises(RegistrationFormatError, match='Failed to parse XLSX file'):
            XlsxAdapter().load(str(bogus))


class TestLoadPlayers:
    def test_unknown_source(self):
        with pytest.raises(ValueError, match='Unknown source type'):
            get_adapter('excel')

    def test_multiple_files_deduplicated(self, tmp_path):
        later = tmp_path / 'later.csv'
        later.write_text(
            'Timestamp,Email Address,Navn,Player-ID,Fødselsår\n'
            '2024-09-01T10:00:00,kari.ny@example.no,Kari Nordmann,2222222,2012\n'
            '2024-09-01T11:00:00,nils@example.no,Nils Berg,6666666,2013\n',
            encoding='utf-8')
        players = load_players('norwegian', [NORWEGIAN_CSV, str(later)])
        assert [p.player_id for p in players] == ['1111111', '2222222', '3333333', '6666666']
        assert players[1].email == 'kari.ny@example.no'

    def test_xlsx_returns_players(self, spond_xlsx, capsys):
        players = load_players('xlsx', [spond_xlsx])
        assert len(players) == 2
        assert 'Deltar: 2, Venteliste: 1' in capsys.readouterr().out


class TestMain:
    def test_norwegian_csv(self, tmp_path):
        output = str(tmp_path / 'out' / 'august.tdf')
        assert main(cli_args('norwegian', [NORWEGIAN_CSV], output, '--city', 'Oslo')) == 0

        with open(output, encoding='utf-8') as f:
            xml = f.read()
        assert xml.count('<player userid=') == 3
        assert '<city>Oslo</city>' in xml
        assert '<lastname>Hansen, jr.</lastname>' in xml

    def test_wix(self, tmp_path):
        output = str(tmp_path / 'wix.tdf')
        assert main(cli_args('wix', [WIX_TSV], output)) == 0
        with open(output, encoding='utf-8') as f:
            xml = f.read()
        assert '<player userid="4444444">' in xml
        assert '<birthdate>02/27/2009</birthdate>' in xml

    def test_xlsx(self, spond_xlsx, tmp_path):
        output = str(tmp_path / 'spond.tdf')
        assert main(cli_args('xlsx', [spond_xlsx], output)) == 0
        with open(output, encoding='utf-8') as f:
            xml = f.read()
        assert '<birthdate>03/05/2010</birthdate>' in xml
        assert 'forelder' not in xml.lower()

    def test_wrong_format_reports_error(self, tmp_path, capsys):
        output = str(tmp_path / 'never.tdf')
        assert main(cli_args('wix', [NORWEGIAN_CSV], output)) == 1
        assert 'Error: CSV header does not match expected Wix format' in capsys.readouterr().err
        assert not os.path.exists(output)

    def test_no_players(self, tmp_path, capsys):
        empty = tmp_path / 'empty.xlsx'
        wb = Workbook()
        wb.active.append(['Deltar (0)'])
        wb.save(empty)
        assert main(cli_args('xlsx', [str(empty)], str(tmp_path / 'x.tdf'))) == 1
        assert 'no players found' in capsys.readouterr().err

    def test_missing_file_reports_error(self, tmp_path, capsys):
        missing = str(tmp_path / 'missing.csv')
        assert main(cli_args('norwegian', [missing], str(tmp_path / 'x.tdf'))) == 1
        assert f'Error: Failed to read {missing}' in capsys.readouterr().err

    def test_non_utf8_export_reports_error(self, tmp_path, capsys):
        latin1 = tmp_path / 'latin1.csv'
        latin1.write_bytes(
            'Timestamp,Email Address,Navn,Player-ID,Fødselsår\n'
            '2024-08-01T10:00:00,ola@example.no,Øyvind Ås,1111111,2010\n'.encode('latin-1'))
        assert main(cli_args('norwegian', [str(latin1)], str(tmp_path / 'x.tdf'))) == 1
        assert 'Error: Failed to read' in capsys.readouterr().err
