#!/usr/bin/env python3
"""CLI entry point for building a TDF file from registration exports.

Usage:
    python build_tdf.py --source norwegian --data registrations.csv \\
        --organizer-name "Oslo Pokemon Liga" --organizer-popid 1234567 \\
        --tournament-name "August Challenge" --city Oslo \\
        --output ./output/august_challenge.tdf
"""

import argparse
import os
import sys

# Add parent directory to path for imports (skip when frozen by PyInstaller)
if not getattr(sys, 'frozen', False):
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tdf_export.core.models import TournamentConfig
from tdf_export.core.deduplicator import deduplicate
from tdf_export.core.tdf_generator import write_tdf
from tdf_export.adapters.base import RegistrationFormatError
from tdf_export.adapters.norwegian_adapter import NorwegianCsvAdapter
from tdf_export.adapters.wix_adapter import WixAdapter
from tdf_export.adapters.xlsx_adapter import XlsxAdapter


ADAPTERS = {
    'norwegian': NorwegianCsvAdapter,
    'wix': WixAdapter,
    'xlsx': XlsxAdapter,
}


def get_adapter(source: str):
    """Return an adapter instance for a --source value."""
    try:
        return ADAPTERS[source]()
    except KeyError:
        raise ValueError(f"Unknown source type: {source}") from None


def load_players(source: str, data_paths: list[str]) -> list:
    """Parse every input file and merge the players.

    Text exports are deduplicated again after merging so a player who
    appears in several files is only listed once.
    """
    adapter = get_adapter(source)
    players = []
    for data_path in data_paths:
        print(f"Parsing {data_path}...")
        parsed = adapter.parse_file(data_path)
        if source == 'xlsx':
            sections = parsed.sections
            print(f"  Deltar: {sections['deltar']}, Venteliste: {sections['venteliste']}, "
                  f"Ikke svart: {sections['ikke_svart']}, Kommer ikke: {sections['kommer_ikke']}")
            parsed = parsed.players
        print(f"  -> {len(parsed)} players")
        players.extend(parsed)

    if source != 'xlsx' and len(data_paths) > 1:
        players = deduplicate(players)
        print(f"Total: {len(players)} unique players from {len(data_paths)} files")
    return players


def main(argv=None):
    parser = argparse.ArgumentParser(description='Build a TDF tournament file from registrations')
    parser.add_argument('--source', required=True, choices=sorted(ADAPTERS),
                        help='Registration export format')
    parser.add_argument('--data', nargs='+', required=True, help='Input export file(s)')
    parser.add_argument('--organizer-name', required=True, help='Organizer name')
    parser.add_argument('--organizer-popid', required=True, help='Organizer Play! Pokemon ID')
    parser.add_argument('--tournament-name', default='August Challenge', help='Tournament name')
    parser.add_argument('--city', default='Update', help='Tournament city')
    parser.add_argument('--start-date', default=None,
                        help='Start date as MM/DD/YYYY HH:MM:SS (default: now)')
    parser.add_argument('--output', required=True, help='Path of the .tdf file to write')

    args = parser.parse_args(argv)

    config = TournamentConfig(
        organizer_name=args.organizer_name,
        organizer_popid=args.organizer_popid,
        tournament_name=args.tournament_name,
        city=args.city,
        start_date=args.start_date,
    )

    try:
        players = load_players(args.source, args.data)
    except RegistrationFormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not players:
        print("Error: no players found", file=sys.stderr)
        return 1

    output_dir = os.path.dirname(os.path.abspath(args.output))
    os.makedirs(output_dir, exist_ok=True)
    write_tdf(args.output, players, config)
    print(f"Generated {args.output} with {len(players)} players")

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
