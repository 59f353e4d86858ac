"""TDF (tournament definition file) generator.

Renders normalized players plus organizer metadata into the XML dialect the
pairing application imports. The layout is fixed by that application, so the
document is assembled from a template rather than an XML library: attribute
order, tab indentation and empty sections must come out exactly as below.
"""

import datetime

from .models import BirthDate, BirthDateKind, PlayerData, TournamentConfig


XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'

TOURNAMENT_TEMPLATE = '''
<tournament type="2" stage="1" version="1.74" gametype="TRADING_CARD_GAME" mode="LEAGUECHALLENGE">
\t<data>
\t\t<name>{name}</name>
\t\t<id></id>
\t\t<city>{city}</city>
\t\t<state></state>
\t\t<country>{country}</country>
\t\t<roundtime>0</roundtime>
\t\t<finalsroundtime>0</finalsroundtime>
\t\t<organizer popid="{popid}" name="{organizer}"/>
\t\t<startdate>{start_date}</startdate>
\t\t<lessswiss>false</lessswiss>
\t\t<autotablenumber>true</autotablenumber>
\t\t<overflowtablestart>0</overflowtablestart>
\t</data>
\t<timeelapsed>0</timeelapsed>
\t<players>'''

PLAYER_TEMPLATE = '''\t\t<player userid="{userid}">
\t\t\t<firstname>{firstname}</firstname>
\t\t\t<lastname>{lastname}</lastname>
\t\t\t<birthdate>{birthdate}</birthdate>
\t\t\t<creationdate>{created}</creationdate>
\t\t\t<lastmodifieddate>{created}</lastmodifieddate>
\t\t</player>'''

XML_FOOTER = '''
\t</players>
\t<pods>
\t</pods>
\t<finalsoptions>
\t</finalsoptions>
</tournament>'''

# Day/month used when only the birth year is known
PLACEHOLDER_MONTH_DAY = '02/27'

# '&' must come first so entities produced by later replacements survive
_XML_ESCAPES = [
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&#39;'),
]


def escape_xml(text: str) -> str:
    for char, entity in _XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def split_name(full_name: str) -> tuple[str, str]:
    """Split "Ola Nordmann Hansen" -> ("Ola", "Nordmann Hansen")."""
    parts = full_name.strip().split(' ')
    if len(parts) == 1:
        return parts[0], ''
    return parts[0], ' '.join(parts[1:])


def format_birth_date(birth_date: BirthDate) -> str:
    """Convert a tagged birth date to the MM/DD/YYYY the TDF expects."""
    kind = birth_date.kind
    value = birth_date.value
    if kind is BirthDateKind.ISO_DATE:
        year, month, day = value.split('-')
        return f'{month}/{day}/{year}'
    if kind is BirthDateKind.EURO_DATE:
        day, month, year = value.split('/')
        return f'{month}/{day}/{year}'
    if kind is BirthDateKind.YEAR:
        return f'{PLACEHOLDER_MONTH_DAY}/{value}'
    return value


def format_datetime(moment: datetime.datetime) -> str:
    return moment.strftime('%m/%d/%Y %H:%M:%S')


def generate_tdf_xml(players: list[PlayerData], config: TournamentConfig,
                     now: datetime.datetime | None = None) -> str:
    """Build the TDF document.

    Args:
        players: Normalized (deduplicated) players.
        config: Organizer and tournament metadata.
        now: Generation time. Used for every player's creation and
             modification date, and for the start date when the config
             has none. Defaults to the current local time.

    Returns:
        The XML document as a string.
    """
    if now is None:
        now = datetime.datetime.now()
    created = format_datetime(now)
    start_date = config.start_date or created

    header = TOURNAMENT_TEMPLATE.format(
        name=escape_xml(config.tournament_name or 'August Challenge'),
        city=escape_xml(config.city or 'Update'),
        country=escape_xml(config.country),
        popid=escape_xml(config.organizer_popid),
        organizer=escape_xml(config.organizer_name),
        start_date=start_date,
    )

    player_blocks = []
    for player in players:
        first_name, last_name = split_name(player.navn)
        player_blocks.append(PLAYER_TEMPLATE.format(
            userid=escape_xml(player.player_id),
            firstname=escape_xml(first_name),
            lastname=escape_xml(last_name),
            birthdate=format_birth_date(player.birth_year),
            created=created,
        ))

    return XML_HEADER + header + '\n' + '\n'.join(player_blocks) + XML_FOOTER


def write_tdf(output_path: str, players: list[PlayerData], config: TournamentConfig,
              now: datetime.datetime | None = None) -> str:
    """Write the TDF document to `output_path` as UTF-8.

    Returns:
        The output_path for convenience.
    """
    xml = generate_tdf_xml(players, config, now=now)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(xml)
    return output_path
