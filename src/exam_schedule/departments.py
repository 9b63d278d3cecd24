"""
Static registry of university divisions.

Each division has a URL-safe slug used both as the public lookup key and as the
cache key, plus the numeric id the schedule endpoint expects.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Department:
    """A division whose exam schedule can be fetched."""

    name: str
    slug: str
    id: int


DEPARTMENTS: tuple[Department, ...] = (
    Department(name="Félagsvísindasvið", slug="felagsvisindasvid", id=1),
    Department(name="Heilbrigðisvísindasvið", slug="heilbrigdisvisindasvid", id=2),
    Department(name="Hugvísindasvið", slug="hugvisindasvid", id=3),
    Department(name="Menntavísindasvið", slug="menntavisindasvid", id=4),
    Department(name="Verkfræði- og náttúruvísindasvið", slug="verkfraedi-og-natturuvisindasvid", id=5),
)


def find_department(slug: str, departments: tuple[Department, ...] = DEPARTMENTS) -> Department | None:
    """Return the department registered under ``slug`` or None."""
    for department in departments:
        if department.slug == slug:
            return department
    return None
