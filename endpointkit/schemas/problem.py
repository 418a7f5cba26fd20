"""Problem details schemas shared by the error constructors and decoders."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel
from pydantic import ConfigDict


class ParameterType(str, Enum):
    """Location of a request parameter."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"


class Property(BaseModel):
    """Single body field that violated a constraint or business rule."""

    model_config = ConfigDict(frozen=True)

    detail: str
    pointer: str


class Parameter(BaseModel):
    """Single request parameter that could not be bound or validated."""

    model_config = ConfigDict(frozen=True)

    detail: str
    parameter: str
    type: ParameterType


class ProblemDocument(BaseModel):
    """Core members of a problem details document."""

    model_config = ConfigDict(strict=True, extra="ignore")

    type: str = ""
    title: str = ""
    detail: str = ""
    status: int = 0
    code: str = ""
    instance: str = ""
