"""
Stateless conversions between the service boundary shapes and the ORM entity.

    CreatePortfolioRequest --to_entity-->   Portfolio (unsaved)
    Portfolio              --to_response--> PortfolioResponse (frozen)
    UpdatePortfolioRequest --to_changes-->  dict of column values
"""
from typing import Any

from investflow.models.portfolio import Portfolio
from investflow.schemas.portfolio import (
    CreatePortfolioRequest,
    UpdatePortfolioRequest,
    PortfolioResponse,
)


def to_entity(request: CreatePortfolioRequest) -> Portfolio:
    # id and timestamps are left for the store to assign
    return Portfolio(
        name=request.name,
        monthly_amount=request.monthly_amount,
        duration_months=request.duration_months,
    )


def to_response(entity: Portfolio) -> PortfolioResponse:
    """Build a new immutable response from a persisted entity."""
    return PortfolioResponse(
        id=entity.id,
        name=entity.name,
        monthly_amount=entity.monthly_amount,
        duration_months=entity.duration_months,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )


def to_changes(request: UpdatePortfolioRequest) -> dict[str, Any]:
    # exclude_unset: fields the caller never mentioned are not touched
    return request.model_dump(exclude_unset=True, exclude_none=True, by_alias=False)
