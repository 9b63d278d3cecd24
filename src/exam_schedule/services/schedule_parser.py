"""
Parser turning the schedule endpoint's payload into structured exam records.

The payload is a JSON envelope; its ``html`` field is a fragment containing one
``<table>`` per faculty, each preceded by a heading element.
"""

import logging

import orjson
from bs4 import BeautifulSoup, Tag

from exam_schedule.schemas import DepartmentTestListing, TestGroup, TestRecord

logger = logging.getLogger(__name__)

# Positional column layout of every exam table row
COLUMNS = ("course", "name", "type", "students", "date")


class ScheduleParseError(ValueError):
    """The payload could not be decoded into an HTML fragment."""


def extract_html(raw: str | bytes) -> str:
    """Return the HTML fragment wrapped in the JSON envelope."""
    try:
        envelope = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ScheduleParseError(f"Schedule payload is not valid JSON: {exc}") from exc

    if not isinstance(envelope, dict) or "html" not in envelope:
        raise ScheduleParseError("Schedule payload has no 'html' field")
    return envelope["html"] or ""


def _cell_text(cells: list[Tag], index: int) -> str:
    if index >= len(cells):
        return ""
    return cells[index].get_text().strip()


def _body_rows(table: Tag) -> list[Tag]:
    """Rows holding at least one td cell; header-only rows are skipped."""
    bodies = table.find_all("tbody", recursive=False)
    # lxml keeps tables without an explicit tbody as-is
    containers = bodies or [table]
    rows = [row for container in containers for row in container.find_all("tr", recursive=False)]
    return [row for row in rows if row.find("td", recursive=False)]


def parse_table(table: Tag) -> TestGroup:
    heading_el = table.find_previous_sibling(True)
    heading = heading_el.get_text().strip() if heading_el is not None else ""

    tests = []
    for row in _body_rows(table):
        cells = row.find_all("td", recursive=False)
        values = {column: _cell_text(cells, i) for i, column in enumerate(COLUMNS)}
        tests.append(TestRecord(**values))
    return TestGroup(heading=heading, tests=tests)


def parse_schedule(raw: str | bytes) -> DepartmentTestListing:
    """
    Parse a schedule payload into one group per table, in document order.

    Rows are read positionally (course, name, type, students, date); a short
    row yields empty strings for its missing cells and extra cells are ignored.

    Args:
        raw: Response body from the schedule endpoint

    Returns:
        List of TestGroup, empty if the fragment has no tables

    Raises:
        ScheduleParseError: envelope is not JSON or lacks the html field
    """
    html = extract_html(raw)
    soup = BeautifulSoup(html, "lxml")

    listing = [parse_table(table) for table in soup.find_all("table")]
    logger.debug(
        "Parsed %d tables with %d rows",
        len(listing),
        sum(len(group.tests) for group in listing),
    )
    return listing
