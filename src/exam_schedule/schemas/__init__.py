from .schedule_schemas import (
    CacheClearResponse,
    DepartmentSchema,
    DepartmentTestListing,
    StatsSummary,
    TestGroup,
    TestRecord,
    listing_adapter,
)

__all__ = [
    "CacheClearResponse",
    "DepartmentSchema",
    "DepartmentTestListing",
    "StatsSummary",
    "TestGroup",
    "TestRecord",
    "listing_adapter",
]
