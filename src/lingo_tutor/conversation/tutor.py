"""Tutor response generation: composed prompt + history -> structured reply."""

from typing import Protocol

import structlog
from openai import AsyncOpenAI

from lingo_tutor.conversation.llm import complete_json, parse_reply
from lingo_tutor.models.tutor import TutorReply

logger = structlog.get_logger()

DEFAULT_HISTORY_WINDOW = 5


class TutorResponder(Protocol):
    """Anything that can turn a prompt, history and message into a TutorReply."""

    async def generate(
        self,
        system_prompt: str,
        history: list[dict[str, str]],
        message: str,
    ) -> TutorReply: ...


class OpenAITutor:
    """Chat-completion backed tutor.

    One request per call; provider failures surface as UpstreamError and
    unusable replies as MalformedResponseError.

    Args:
        api_key: OpenAI API key.
        model: Chat model name.
        temperature: Sampling temperature.
        max_tokens: Completion token cap.
        history_window: Number of prior turns sent as context.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4",
        temperature: float = 0.7,
        max_tokens: int = 500,
        history_window: int = DEFAULT_HISTORY_WINDOW,
    ):
        self.client = AsyncOpenAI(api_key=api_key, max_retries=0)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.history_window = history_window

    async def generate(
        self,
        system_prompt: str,
        history: list[dict[str, str]],
        message: str,
    ) -> TutorReply:
        """Generate the tutor's reply to ``message``.

        Args:
            system_prompt: Instruction from build_system_prompt.
            history: Prior turns as {"role", "content"}, oldest first.
            message: The learner's new message.

        Returns:
            Parsed TutorReply.
        """
        context = history[-self.history_window:] if self.history_window > 0 else []
        messages = [
            {"role": "system", "content": system_prompt},
            *({"role": m["role"], "content": m["content"]} for m in context),
            {"role": "user", "content": message},
        ]
        data = await complete_json(
            self.client,
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        reply = parse_reply(data, TutorReply)
        logger.info(
            "tutor_reply_generated",
            model=self.model,
            history_turns=len(context),
            has_error=reply.correction.has_error,
            new_words=len(reply.new_words),
        )
        return reply

    async def close(self) -> None:
        await self.client.close()
