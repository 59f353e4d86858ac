"""Minimal CSV row splitter for Google Forms exports.

A double quote toggles quoting on and off; commas inside quotes are kept as
text. Quotes are never escaped or doubled, and fields are not trimmed.
"""


def split_csv_row(row: str) -> list[str]:
    fields = []
    current = []
    in_quotes = False

    for char in row:
        if char == '"':
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            fields.append(''.join(current))
            current = []
        else:
            current.append(char)

    fields.append(''.join(current))
    return fields
