"""
OpenAI LLM provider using official SDK.
"""

from openai import AsyncOpenAI
from pydantic import BaseModel

from conceptweave.core.llm.base import LLMProvider
from conceptweave.utils.exceptions import LLMError


class OpenAILLM(LLMProvider):
    """
    OpenAI chat completions.

    Structured output goes through ``chat.completions.parse`` so the
    response is validated against the requested model by the SDK.
    """

    provider = "OpenAI"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        self.model = model
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    async def _chat(
        self,
        messages: list[dict],
        response_format: type[BaseModel] | None,
        max_tokens: int,
        temperature: float,
        **kwargs,
    ) -> BaseModel | str:
        params = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }

        if response_format:
            response = await self.client.chat.completions.parse(
                **params, response_format=response_format
            )
            parsed = response.choices[0].message.parsed
            if not parsed:
                raise LLMError("OpenAI returned no parsed output", {"model": self.model})
            return parsed

        response = await self.client.chat.completions.create(**params)
        content = response.choices[0].message.content
        if not content:
            raise LLMError("OpenAI returned empty content", {"model": self.model})
        return content

    async def close(self):
        await self.client.close()
