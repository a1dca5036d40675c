"""
LLM provider abstraction layer for text generation.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""
from conceptweave.core.llm.base import LLMProvider
from conceptweave.core.llm.ollama import OllamaLLM
from conceptweave.core.llm.openai import OpenAILLM

__all__ = [
    "LLMProvider",
    "OllamaLLM",
    "OpenAILLM",
]

