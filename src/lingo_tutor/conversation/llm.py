"""Single-shot JSON chat completions against the OpenAI API."""

import json
from typing import TypeVar

import pydantic
import structlog
from openai import AsyncOpenAI, OpenAIError

from lingo_tutor.errors import MalformedResponseError, UpstreamError

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


async def complete_json(
    client: AsyncOpenAI,
    *,
    model: str,
    messages: list[dict[str, str]],
    temperature: float,
    max_tokens: int,
) -> dict:
    """Request a JSON-object completion and decode it.

    Raises:
        UpstreamError: The provider call failed.
        MalformedResponseError: The reply was empty or not a JSON object.
    """
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
        )
    except OpenAIError as exc:
        logger.warning("llm_upstream_failed", model=model, error=type(exc).__name__)
        raise UpstreamError("Language model request failed") from exc

    content = response.choices[0].message.content if response.choices else None
    if not content:
        logger.warning("llm_empty_response", model=model)
        raise MalformedResponseError("No response from language model")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        logger.warning("llm_invalid_json", model=model, preview=content[:200])
        raise MalformedResponseError("Language model reply is not valid JSON") from exc

    if not isinstance(data, dict):
        logger.warning("llm_unexpected_json", model=model, kind=type(data).__name__)
        raise MalformedResponseError("Language model reply is not a JSON object")
    return data


def parse_reply(data: dict, schema: type[ModelT]) -> ModelT:
    """Validate decoded JSON against ``schema``."""
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        logger.warning(
            "llm_reply_schema_mismatch",
            schema=schema.__name__,
            errors=exc.error_count(),
        )
        raise MalformedResponseError(
            f"Language model reply is missing required fields for {schema.__name__}"
        ) from exc
