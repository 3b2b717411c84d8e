import logging
import requests
from typing import Dict, List

import settings
from errors import ConfigurationError, ExternalServiceError, RateLimitError, ResponseParseError

logger = logging.getLogger(__name__)


def chat_completion(messages: List[Dict[str, str]], temperature: float = 0.4, max_tokens: int = 1000) -> str:
    """
    Send role/content messages to the chat-completions endpoint and return
    the text content of the first choice.

    Non-2xx responses raise ExternalServiceError carrying the status code
    (RateLimitError for 429). Nothing is retried.
    """
    api_key = settings.llm_api_key()
    if not api_key:
        raise ConfigurationError("LLM_API_KEY is not set")

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json"
    }
    payload = {
        "model": settings.MODEL_NAME,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }

    try:
        response = requests.post(settings.LLM_API_URL, headers=headers, json=payload, timeout=settings.llm_timeout())
    except requests.exceptions.Timeout as e:
        logger.error(f"Text-generation request timed out: {e}")
        raise ExternalServiceError("The text-generation service did not respond in time") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Text-generation request failed: {e}")
        raise ExternalServiceError(f"Connection error: {e}") from e

    if response.status_code == 429:
        logger.warning(f"API rate limited: {response.text[:300]}")
        raise RateLimitError()
    if not response.ok:
        logger.error(f"API Error Response ({response.status_code}): {response.text[:500]}")
        raise ExternalServiceError(f"API Error: {response.status_code}", status_code=response.status_code)

    try:
        data = response.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        logger.error(f"Unexpected API response shape: {e}")
        raise ResponseParseError("Unexpected response from the text-generation service") from e

    if not isinstance(content, str):
        raise ResponseParseError("Unexpected response from the text-generation service")
    return content
