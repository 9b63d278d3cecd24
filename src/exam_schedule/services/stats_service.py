"""
Cross-division exam statistics.

Looks up every registered division concurrently and folds all exam rows into
min/max/count/sum of students.
"""

import asyncio
import logging
import math

from exam_schedule.departments import DEPARTMENTS, Department
from exam_schedule.schemas import DepartmentTestListing, StatsSummary
from exam_schedule.services.test_lookup_service import TestLookupService

logger = logging.getLogger(__name__)

MAX_SAFE_INTEGER = 2**53 - 1
MIN_SAFE_INTEGER = -MAX_SAFE_INTEGER


def coerce_students(value: str | int | float) -> int | float:
    """Numeric value of a students cell; empty or non-numeric text counts as 0."""
    if isinstance(value, (int, float)):
        return value
    text = value.strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        logger.warning("Non-numeric student count %r treated as 0", value)
        return 0
    if not math.isfinite(number):
        logger.warning("Non-finite student count %r treated as 0", value)
        return 0
    return number


def format_average(num_students: int | float, num_tests: int) -> str:
    if num_tests == 0:
        return "NaN"
    return f"{num_students / num_tests:.2f}"


def summarize(listings: list[DepartmentTestListing | None]) -> StatsSummary:
    minimum: int | float = MAX_SAFE_INTEGER
    maximum: int | float = MIN_SAFE_INTEGER
    num_tests = 0
    num_students: int | float = 0

    for listing in listings:
        # unknown departments contribute nothing
        if listing is None:
            continue
        for group in listing:
            for test in group.tests:
                students = coerce_students(test.students)
                minimum = min(minimum, students)
                maximum = max(maximum, students)
                num_tests += 1
                num_students += students

    return StatsSummary(
        min=minimum,
        max=maximum,
        num_tests=num_tests,
        num_students=num_students,
        average_students=format_average(num_students, num_tests),
    )


async def get_stats(
    lookup: TestLookupService,
    departments: tuple[Department, ...] = DEPARTMENTS,
) -> StatsSummary:
    """
    Aggregate exam statistics over every department.

    Lookups run concurrently in a task group; the first failure cancels the
    remaining lookups and is re-raised as-is.
    """
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(lookup.get_tests(department.slug)) for department in departments]
    except ExceptionGroup as exc_group:
        raise exc_group.exceptions[0]

    summary = summarize([task.result() for task in tasks])
    logger.debug("Stats over %d departments: %s", len(departments), summary)
    return summary
