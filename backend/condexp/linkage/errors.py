"""Errors raised by the linkage pipeline. All of them abort the run."""


class LinkageError(Exception):
    """Base class for fatal linkage/schema defects."""


class SchemaMismatchError(LinkageError):
    """An expected column is missing from an input table."""

    def __init__(self, table: str, missing: list[str]):
        self.table = table
        self.missing = list(missing)
        super().__init__(f"{table}: missing required columns {self.missing}")


class EventTypeContaminationError(LinkageError):
    """Link rows for one category still carry another event-type code."""


class DuplicateKeyError(LinkageError):
    """A key that must be unique (event id, condition id, person id) is repeated."""


class RowCountInvariantError(LinkageError):
    """A person-indexed table no longer has one row per cohort person."""

    def __init__(self, stage: str, expected: int, actual: int):
        self.stage = stage
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{stage}: expected {expected} rows (one per cohort person), got {actual}"
        )


class NullKeyError(LinkageError):
    """An id or survey design column that keys a join is blank."""

    def __init__(self, table: str, columns: list[str], count: int):
        self.table = table
        self.columns = list(columns)
        self.count = count
        super().__init__(f"{table}: {count} rows with a blank key in {self.columns}")
