import math

from pydantic import BaseModel, field_validator

from condexp.models.tables import CLUSTER, STRATUM, WEIGHT


class ReportingOptions(BaseModel):
    strata: str = STRATUM
    cluster: str = CLUSTER
    weight: str = WEIGHT
    digits: int = 2

    @property
    def design_columns(self) -> list[str]:
        return [self.strata, self.cluster, self.weight]


class WeightedEstimate(BaseModel):
    variable: str
    subgroup: str  # "all" or the indicator column
    n: int  # unweighted persons
    population: float  # sum of weights
    mean: float | None  # None when the subgroup is empty
    total: float

    @field_validator("mean", mode="before")
    @classmethod
    def nan_to_none(cls, v):
        if isinstance(v, float) and math.isnan(v):
            return None
        return v
