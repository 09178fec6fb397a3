"""Shared pieces for the API request/response models."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# ISO 8601 with Z suffix
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while keeping snake_case fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProblemDetailResponse(BaseModel):
    """Error response (RFC 7807).

    Attributes:
        type: Error type URN.
        title: Human-readable error title.
        status: HTTP status code.
        detail: Detailed error message.
        instance: Request path that caused the error.
    """

    type: str = Field(..., description="Error type URN")
    title: str = Field(..., description="Human-readable error title")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Detailed error message")
    instance: str = Field(..., description="Request path that caused the error")


PROBLEM_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ProblemDetailResponse, "description": "Invalid request"},
    404: {"model": ProblemDetailResponse, "description": "Not found"},
    409: {"model": ProblemDetailResponse, "description": "Conflicting queue state"},
    503: {"model": ProblemDetailResponse, "description": "Case service unavailable"},
}
