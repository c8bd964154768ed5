"""Query API controller — field catalogue, query compilation and applicability."""

from fastapi import APIRouter, Depends, HTTPException, status

from demand_search.application.schemas import (
    ApplicabilityRequest,
    ApplicabilityResponse,
    CompileRequest,
    CompileResponse,
    FieldSchema,
    FieldValuesResponse,
)
from demand_search.application.services import (
    FIELD_REGISTRY,
    QueryBuilderService,
    compile_query,
    fields_for,
    is_applicable,
)
from demand_search.domain.entities import Criterion, Domain
from demand_search.domain.exceptions import PlanningServiceError, UnknownFieldError
from demand_search.infrastructure.dependencies import get_query_builder_service

router = APIRouter(prefix="/query", tags=["query"])


@router.get("/fields", response_model=list[FieldSchema])
async def list_fields(domain: Domain | None = None) -> list[FieldSchema]:
    """Searchable attributes, optionally restricted to one domain."""
    specs = fields_for(domain) if domain else list(FIELD_REGISTRY)
    return [FieldSchema.model_validate(s, from_attributes=True) for s in specs]


@router.get("/fields/{token}/values", response_model=FieldValuesResponse)
async def list_field_values(
    token: str,
    builder: QueryBuilderService = Depends(get_query_builder_service),
) -> FieldValuesResponse:
    """Distinct values of a field across its master table (value suggestions)."""
    try:
        await builder.load_master_data()
        values = builder.value_options(token)
    except UnknownFieldError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except PlanningServiceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return FieldValuesResponse(token=token, values=values)


@router.post("/compile", response_model=CompileResponse)
async def compile_criteria(body: CompileRequest) -> CompileResponse:
    """Compile criteria into the backend query grammar."""
    criteria = [
        Criterion(field=c.field, value=c.value, operator=c.operator)
        for c in body.criteria
    ]
    return CompileResponse(query=compile_query(criteria))


@router.post("/applicability", response_model=ApplicabilityResponse)
async def check_applicability(body: ApplicabilityRequest) -> ApplicabilityResponse:
    """Whether a saved query filters on at least one field of the domain."""
    return ApplicabilityResponse(
        domain=body.domain,
        applicable=is_applicable(body.domain, body.query),
    )
