"""
Event categories

Each MEPS event file that can be linked to conditions through CLNK is
described once here: its EVENTYPE code in the link file, the cost column
that gets summed per person, an optional utilization column (nights for
inpatient stays), and the person-level totals from the consolidated file
that are carried through the rollup for comparison.
"""

from pydantic import BaseModel, ConfigDict

from condexp.models.tables import TableSchema, event_schema


class EventCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str          # prefix for output columns, also the table role
    label: str
    event_type: int    # CLNK EVENTYPE
    cost: str
    utilization: str | None = None
    utilization_label: str | None = None  # e.g. "nights" -> ip_cond_nights
    cohort_totals: tuple[str, ...] = ()

    @property
    def table_schema(self) -> TableSchema:
        return event_schema(self.name, self.cost, self.utilization)

    @property
    def exp_column(self) -> str:
        return f"{self.name}_cond_exp"

    @property
    def events_column(self) -> str:
        return f"{self.name}_cond_events"

    @property
    def any_column(self) -> str:
        return f"{self.name}_cond_any"

    @property
    def utilization_column(self) -> str | None:
        if self.utilization is None:
            return None
        return f"{self.name}_cond_{self.utilization_label or self.utilization}"

    @property
    def condition_columns(self) -> list[str]:
        """Condition-specific columns this category adds to the comprehensive record."""
        cols = [self.exp_column]
        if self.utilization_column is not None:
            cols.append(self.utilization_column)
        cols += [self.events_column, self.any_column]
        return cols


OFFICE_BASED = EventCategory(
    name="ob",
    label="Office-based visits",
    event_type=1,
    cost="obxp",
    cohort_totals=("obvexp",),
)

OUTPATIENT = EventCategory(
    name="op",
    label="Outpatient visits",
    event_type=2,
    cost="opxp",
    cohort_totals=("optexp",),
)

EMERGENCY_ROOM = EventCategory(
    name="er",
    label="Emergency room visits",
    event_type=3,
    cost="erxp",
    cohort_totals=("ertexp",),
)

INPATIENT = EventCategory(
    name="ip",
    label="Inpatient stays",
    event_type=4,
    cost="ipxp",
    utilization="numnighx",
    utilization_label="nights",
    cohort_totals=("iptexp", "ipngtd"),
)

CATEGORIES: dict[str, EventCategory] = {
    c.name: c for c in (OFFICE_BASED, OUTPATIENT, EMERGENCY_ROOM, INPATIENT)
}

DEFAULT_CATEGORIES: tuple[EventCategory, ...] = (OFFICE_BASED, INPATIENT)


def get_category(name: str) -> EventCategory:
    try:
        return CATEGORIES[name]
    except KeyError:
        raise KeyError(
            f"Unknown event category {name!r}. Known: {sorted(CATEGORIES)}"
        ) from None
