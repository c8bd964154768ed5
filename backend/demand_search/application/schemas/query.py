"""Pydantic DTOs for query composition (fields, compile, applicability)."""

from pydantic import BaseModel, Field

from demand_search.domain.entities import BoolOperator, Domain


class FieldSchema(BaseModel):
    """A searchable attribute of one master domain."""

    domain: Domain
    ui_name: str
    token: str
    label: str

    model_config = {"from_attributes": True}


class FieldValuesResponse(BaseModel):
    token: str
    values: list[str]


class CriterionSchema(BaseModel):
    """One ``token:value`` pair; ``operator`` joins it to the previous criterion."""

    field: str = Field(..., min_length=1, examples=["businessunit"])
    value: str = Field(..., examples=["Beverages"])
    operator: BoolOperator | None = None


class CompileRequest(BaseModel):
    criteria: list[CriterionSchema] = Field(default_factory=list)


class CompileResponse(BaseModel):
    """``query`` is null when no criterion survives (nothing to search for)."""

    query: str | None


class ApplicabilityRequest(BaseModel):
    domain: Domain
    query: str


class ApplicabilityResponse(BaseModel):
    domain: Domain
    applicable: bool
