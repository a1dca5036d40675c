"""
Ollama LLM provider using native ollama-python SDK.
"""

import json

import ollama
from pydantic import BaseModel

from conceptweave.core.llm.base import LLMProvider
from conceptweave.utils.exceptions import LLMError


class OllamaLLM(LLMProvider):
    """
    Ollama LLM provider for text generation.

    Uses native ollama-python SDK for chat completions
    with JSON mode for structured outputs.
    """

    provider = "Ollama"

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama LLM provider.

        Args:
            host: Ollama server URL
            model: Model name for text generation (e.g., "llama3.1", "mistral")
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def _chat(
        self,
        messages: list[dict],
        response_format: type[BaseModel] | None,
        max_tokens: int,
        temperature: float,
        **kwargs,
    ) -> BaseModel | str:
        """
        Structured output uses JSON mode, with an example object built from
        the response model's schema appended to the user prompt.
        """
        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
            **kwargs.pop("options", {}),
        }

        format_type = None
        if response_format:
            format_type = "json"
            example_str = json.dumps(self._example_from_schema(response_format), indent=2)
            prompt = messages[-1]["content"]
            messages = messages[:-1] + [
                {
                    "role": "user",
                    "content": f"""{prompt}

You MUST respond with valid JSON matching this structure:
{example_str}

IMPORTANT:
- Replace placeholder values like "<field_name>" with actual content
- Return ONLY valid JSON, no markdown formatting or extra text
- Do not return the schema itself, return actual data""",
                }
            ]

        response = await self.client.chat(
            model=self.model,
            messages=messages,
            format=format_type,
            options=options,
            **kwargs,
        )
        content = response["message"]["content"]

        if response_format:
            try:
                return response_format.model_validate_json(self._extract_json(content))
            except Exception as e:
                raise LLMError(
                    f"Failed to parse structured output: {e}\n"
                    f"Raw response (first 500 chars): {content[:500]}\n"
                    f"Expected format: {response_format.__name__}",
                    {"model": self.model, "host": self.host},
                ) from e

        return content

    def _example_from_schema(self, response_format: type[BaseModel]) -> dict:
        """Build a small example JSON object from the model's top-level properties."""
        schema = response_format.model_json_schema()
        example = {}

        for field_name, field_info in schema.get("properties", {}).items():
            field_type = field_info.get("type", "string")

            if field_type == "string":
                example[field_name] = f"<{field_name}>"
            elif field_type in ("number", "integer"):
                example[field_name] = 0.5
            elif field_type == "boolean":
                example[field_name] = True
            elif field_type == "array":
                example[field_name] = []
            elif field_type == "object":
                example[field_name] = {}
            else:
                example[field_name] = None

        return example

    def _extract_json(self, content: str) -> str:
        """
        Extract JSON from content that might have markdown formatting.

        Args:
            content: Raw content that may contain JSON

        Returns:
            Cleaned JSON string
        """
        content = content.strip()

        # Remove markdown code blocks
        if "```json" in content:
            content = content.split("```json")[1].split("```")[0].strip()
        elif "```" in content:
            content = content.split("```")[1].split("```")[0].strip()

        return content
