from pydantic import BaseModel


class ColumnSpec(BaseModel):
    name: str
    dtype: str  # "str", "int" or "float"
    # Raw MEPS name when it differs, "{yy}" is the two-digit survey year
    source: str | None = None
    nonnegative: bool = False

    def source_name(self, year: int | None) -> str:
        if self.source is None:
            return self.name
        if year is None:
            return self.name
        return self.source.format(yy=f"{year % 100:02d}")


class TableSchema(BaseModel):
    role: str
    columns: list[ColumnSpec]

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.columns]


PERSON_ID = "dupersid"
CONDITION_ID = "condidx"
EVENT_ID = "evntidx"
EVENT_TYPE = "eventype"

STRATUM = "varstr"
CLUSTER = "varpsu"
WEIGHT = "perwt"

# (person, stratum, cluster, weight) is functionally determined by dupersid
PERSON_KEY = [PERSON_ID, STRATUM, CLUSTER, WEIGHT]

CONDITION_CODE_COLUMNS = ["ccsr1x", "ccsr2x", "ccsr3x"]


COHORT_SCHEMA = TableSchema(role="cohort", columns=[
    ColumnSpec(name=PERSON_ID, dtype="str"),
    ColumnSpec(name=STRATUM, dtype="int"),
    ColumnSpec(name=CLUSTER, dtype="int"),
    ColumnSpec(name=WEIGHT, dtype="float", source="perwt{yy}f"),
    ColumnSpec(name="totexp", dtype="float", source="totexp{yy}", nonnegative=True),
    ColumnSpec(name="obvexp", dtype="float", source="obvexp{yy}", nonnegative=True),
    ColumnSpec(name="optexp", dtype="float", source="optexp{yy}", nonnegative=True),
    ColumnSpec(name="ertexp", dtype="float", source="ertexp{yy}", nonnegative=True),
    ColumnSpec(name="iptexp", dtype="float", source="iptexp{yy}", nonnegative=True),
    ColumnSpec(name="ipngtd", dtype="float", source="ipngtd{yy}", nonnegative=True),
])

CONDITIONS_SCHEMA = TableSchema(role="conditions", columns=[
    ColumnSpec(name=PERSON_ID, dtype="str"),
    ColumnSpec(name=CONDITION_ID, dtype="str"),
    *[ColumnSpec(name=c, dtype="str") for c in CONDITION_CODE_COLUMNS],
])

LINK_SCHEMA = TableSchema(role="link", columns=[
    ColumnSpec(name=PERSON_ID, dtype="str"),
    ColumnSpec(name=CONDITION_ID, dtype="str"),
    ColumnSpec(name=EVENT_ID, dtype="str"),
    ColumnSpec(name=EVENT_TYPE, dtype="int"),
])


def event_schema(role: str, cost: str, utilization: str | None = None) -> TableSchema:
    """Schema for one event file: ids plus a cost and optional utilization column."""
    columns = [
        ColumnSpec(name=PERSON_ID, dtype="str"),
        ColumnSpec(name=EVENT_ID, dtype="str"),
        ColumnSpec(name=cost, dtype="float", source=cost + "{yy}x", nonnegative=True),
    ]
    if utilization is not None:
        columns.append(ColumnSpec(name=utilization, dtype="float", nonnegative=True))
    return TableSchema(role=role, columns=columns)


BASE_SCHEMAS: dict[str, TableSchema] = {
    "cohort": COHORT_SCHEMA,
    "conditions": CONDITIONS_SCHEMA,
    "link": LINK_SCHEMA,
}
