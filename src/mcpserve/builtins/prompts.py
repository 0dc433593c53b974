"""Built-in prompts."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import Field

from mcpserve.protocol.models import PromptMessage, TextContent
from mcpserve.server.schema import ArgumentShape

if TYPE_CHECKING:
    from mcpserve.server.context import RequestContext
    from mcpserve.server.registrar import Registrar

REVIEW_PREFIX = "이 코드에 대해서 리뷰 진행해줘: \n\n"


class PromptName(str, Enum):
    REVIEW_CODE = "review-code"


class ReviewCodeArgs(ArgumentShape):
    code: str = Field(description="Code to review")


def register_prompts(registrar: Registrar) -> None:
    registrar.prompt(PromptName.REVIEW_CODE.value, "Code review prompt", ReviewCodeArgs)(
        review_code
    )


async def review_code(args: ReviewCodeArgs, request: RequestContext) -> list[PromptMessage]:
    text = f"{REVIEW_PREFIX}{args.code}"
    return [PromptMessage(role="user", content=TextContent(text=text))]
