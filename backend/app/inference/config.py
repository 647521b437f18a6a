from app import config
from .chat_completions_client import ChatCompletionsClient


def get_llm_client(timeout: float | None = None) -> ChatCompletionsClient:
    return ChatCompletionsClient(
        base_url=config.LLM_BASE_URL,
        model=config.LLM_MODEL,
        temperature=config.LLM_TEMPERATURE,
        timeout=config.INSIGHTS_TIMEOUT_SECONDS if timeout is None else timeout,
    )
