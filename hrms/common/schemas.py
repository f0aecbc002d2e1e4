"""Shared pydantic building blocks for camelCase JSON payloads."""

from datetime import time
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from hrms.common.constants import TIME_FORMAT


def _round_hours(value: float) -> float:
    return round(value, 2)


def _format_clock(value: time) -> str:
    return value.strftime(TIME_FORMAT)


# Hours stay unrounded in Python; rounding happens only when rendered as JSON.
Hours = Annotated[
    float,
    PlainSerializer(_round_hours, return_type=float, when_used="json-unless-none"),
]

# Time-of-day rendered as "HH:MM"
ClockTime = Annotated[
    time,
    PlainSerializer(_format_clock, return_type=str, when_used="json-unless-none"),
]


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases while accepting field names too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
