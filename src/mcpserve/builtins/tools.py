"""Built-in tools: echo, random-duck, sampling, and list-root-dir."""

from __future__ import annotations

import base64
import json
import re
from enum import Enum
from typing import TYPE_CHECKING, Literal

import httpx
from pydantic import Field

from mcpserve.protocol.errors import InvalidUpstreamResponseError
from mcpserve.protocol.models import ContentBlock, ImageContent, TextContent, to_wire
from mcpserve.server.schema import ArgumentShape

if TYPE_CHECKING:
    from mcpserve.server.context import RequestContext
    from mcpserve.server.registrar import Registrar

ECHO_SUFFIX = " 화이팅" + "!" * 16

_IMAGE_URL = re.compile(r"\.(jpg|gif)\Z", re.IGNORECASE)


class ToolName(str, Enum):
    ECHO = "echo"
    RANDOM_DUCK = "random-duck"
    SAMPLING = "sampling"
    LIST_ROOT_DIR = "list-root-dir"


class EchoArgs(ArgumentShape):
    message: str = Field(description="Message to echo back")


class RandomDuckArgs(ArgumentShape):
    type: Literal["jpg", "gif"] = Field(description="Image type")


class SamplingArgs(ArgumentShape):
    prompt: str = Field(description="Prompt to send to the client's model")


class ListRootDirArgs(ArgumentShape):
    pass


def register_tools(registrar: Registrar) -> None:
    registrar.tool(ToolName.ECHO.value, "Return the input message with a cheer", EchoArgs)(echo)
    registrar.tool(ToolName.RANDOM_DUCK.value, "Return a random duck image", RandomDuckArgs)(
        random_duck
    )
    registrar.tool(ToolName.SAMPLING.value, "Ask the client's model to answer a prompt", SamplingArgs)(
        sampling
    )
    registrar.tool(ToolName.LIST_ROOT_DIR.value, "List the client's root directories", ListRootDirArgs)(
        list_root_dir
    )


async def echo(args: EchoArgs, request: RequestContext) -> list[ContentBlock]:
    return [TextContent(text=args.message + ECHO_SUFFIX)]


async def random_duck(args: RandomDuckArgs, request: RequestContext) -> list[ContentBlock]:
    """Fetch a random duck descriptor, then the image it points to.

    Two sequential GETs, no retry. HTTP errors propagate unchanged.
    """
    settings = request.settings
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        response = await client.get(settings.duck_api_url, params={"type": args.type})
        response.raise_for_status()
        url = _image_url(response)
        image = await client.get(url)
        image.raise_for_status()
    data = base64.b64encode(image.content).decode("ascii")
    return [ImageContent(data=data, mime_type=f"image/{args.type}")]


def _image_url(response: httpx.Response) -> str:
    """Pull the image URL out of the descriptor, rejecting non-jpg/gif links."""
    try:
        payload = response.json()
    except ValueError as exc:
        raise InvalidUpstreamResponseError("descriptor is not JSON") from exc
    url = payload.get("url") if isinstance(payload, dict) else None
    if not isinstance(url, str):
        raise InvalidUpstreamResponseError("descriptor has no url")
    if _IMAGE_URL.search(url) is None:
        raise InvalidUpstreamResponseError(f"not a jpg/gif image URL: {url}")
    return url


async def sampling(args: SamplingArgs, request: RequestContext) -> list[ContentBlock]:
    defaults = request.settings.sampling
    result = await request.require_reverse().request_generation(
        args.prompt,
        system_prompt=defaults.system_prompt,
        max_tokens=defaults.max_tokens,
        temperature=defaults.temperature,
        context_policy=defaults.include_context,
    )
    return [TextContent(text=json.dumps(to_wire(result), ensure_ascii=False))]


async def list_root_dir(args: ListRootDirArgs, request: RequestContext) -> list[ContentBlock]:
    result = await request.require_reverse().request_root_list()
    return [TextContent(text=json.dumps(to_wire(result), ensure_ascii=False))]
