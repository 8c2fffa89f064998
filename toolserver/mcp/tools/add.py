"""
Add tool - sum two integers.

Arguments are 64-bit signed integers; the sum wraps around on overflow the way
native machine integers do.
"""

from typing import List

import structlog
from pydantic import BaseModel, ConfigDict, Field, StrictInt

from ..protocol import Content, TextContent
from ..session import Session
from ..tool import Tool

logger = structlog.get_logger(__name__)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def wrap_int64(value: int) -> int:
    """Reduce value to the signed 64-bit range (two's complement)."""
    return (value - INT64_MIN) % (2 ** 64) + INT64_MIN


class AddParams(BaseModel):
    model_config = ConfigDict(extra="ignore")

    x: StrictInt = Field(..., ge=INT64_MIN, le=INT64_MAX)
    y: StrictInt = Field(..., ge=INT64_MIN, le=INT64_MAX)


class AddTool(Tool):
    """Adds integer fields x and y and returns the decimal sum as text."""

    name = "add"
    description = "Add two integers"
    input_schema = {
        "type": "object",
        "properties": {
            "x": {"type": "integer"},
            "y": {"type": "integer"},
        },
        "required": ["x", "y"],
    }
    params_model = AddParams

    async def execute(self, params: AddParams, session: Session) -> List[Content]:
        total = wrap_int64(params.x + params.y)
        session.set("last_sum", total)
        logger.debug("Computed sum", x=params.x, y=params.y, total=total)
        return [TextContent(text=str(total))]
