"""CSV parsing for bulk imports."""

from dataclasses import dataclass, field

MATERIAL_REQUIRED_HEADERS = ["school", "date", "grade_level", "title", "link"]
EVENT_REQUIRED_HEADERS = ["school", "date", "title"]


@dataclass
class ParsedCSV:
    """Header names and rows of a parsed CSV document."""

    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)


def split_fields(line: str) -> list[str]:
    """Split one CSV line on commas that are outside double quotes.

    Quote characters toggle the quoted state and are dropped. There is no
    escaped-quote syntax, so unbalanced quotes simply swallow the remaining
    separators on the line.
    """
    values: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    values.append("".join(current).strip())
    return values


def parse_csv(text: str) -> ParsedCSV:
    """Parse CSV text into lower-cased headers and header-keyed rows.

    Blank and whitespace-only lines are dropped before anything else, so the
    first non-blank line is the header. Missing trailing values become empty
    strings; values beyond the header count are ignored.

    Args:
        text: Raw CSV content.

    Returns:
        ParsedCSV: Headers and rows (never raises on malformed content).
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return ParsedCSV()

    headers = [h.strip().lower() for h in lines[0].split(",")]

    rows = []
    for line in lines[1:]:
        values = split_fields(line)
        rows.append(
            {header: (values[i] if i < len(values) else "") for i, header in enumerate(headers)}
        )

    return ParsedCSV(headers=headers, rows=rows)


def missing_headers(headers: list[str], required: list[str]) -> list[str]:
    """Return the required headers absent from ``headers``, in required order."""
    return [h for h in required if h not in headers]


def row_number(index: int) -> int:
    """Display row number for a parsed row (the header is line 1)."""
    return index + 2
