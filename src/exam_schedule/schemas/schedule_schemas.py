from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel


class TestRecord(BaseModel):
    """One row of an exam table."""

    __test__ = False  # not a pytest class

    course: str
    name: str
    type: str
    students: str | int | float
    date: str


class TestGroup(BaseModel):
    """A heading and the exam rows of the table that follows it."""

    __test__ = False

    heading: str
    tests: list[TestRecord]


DepartmentTestListing = list[TestGroup]

listing_adapter: TypeAdapter[DepartmentTestListing] = TypeAdapter(DepartmentTestListing)


class StatsSummary(BaseModel):
    """Aggregate student counts across every department's exams."""

    min: int | float
    max: int | float
    num_tests: int
    num_students: int | float
    average_students: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DepartmentSchema(BaseModel):
    """Registry entry as exposed over HTTP."""

    name: str
    slug: str
    id: int

    model_config = ConfigDict(from_attributes=True)


class CacheClearResponse(BaseModel):
    cleared: bool
