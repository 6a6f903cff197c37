"""Pydantic schemas for the Portfolio service boundary."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# Field constraints shared by the create and update shapes
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
# Portfolio.duration_months is a 32-bit INTEGER column
DURATION_MONTHS_MAX = 2_147_483_647


def _reject_blank(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("name must not be blank")
    return value


class PortfolioSchema(BaseModel):
    """Common config: camelCase aliases externally, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CreatePortfolioRequest(PortfolioSchema):
    """Input for creating a portfolio. Never persisted directly."""

    name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    monthly_amount: float = Field(..., gt=0)
    duration_months: int = Field(..., gt=0, le=DURATION_MONTHS_MAX, strict=True)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _reject_blank(v)


class UpdatePortfolioRequest(PortfolioSchema):
    """Partial update. Only fields that are explicitly set are applied."""

    name: str | None = Field(None, min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    monthly_amount: float | None = Field(None, gt=0)
    duration_months: int | None = Field(None, gt=0, le=DURATION_MONTHS_MAX, strict=True)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        return _reject_blank(v)

    @model_validator(mode="after")
    def at_least_one_field(self) -> "UpdatePortfolioRequest":
        if not any(
            getattr(self, field) is not None
            for field in ("name", "monthly_amount", "duration_months")
        ):
            raise ValueError("at least one field must be provided")
        return self


class PortfolioResponse(PortfolioSchema):
    """Read-only projection of a stored portfolio."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    monthly_amount: float
    duration_months: int
    created_at: date
    updated_at: date
