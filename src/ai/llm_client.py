"""
OpenAI-compatible chat completion client
"""
import json
import logging
from typing import List, Dict, Any, Optional

import requests

from src.db.models import APIConfig, Provider
from src.errors import EmptyCompletion, ParseFailure, ProviderError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URLS = {
    Provider.OPENAI: "https://api.openai.com/v1",
    Provider.DEEPSEEK: "https://api.deepseek.com",
    Provider.OLLAMA: "http://localhost:11434/v1",
}


def resolve_base_url(config: APIConfig) -> str:
    """Explicit base URL if set, else the provider default, without trailing slashes"""
    url = config.base_url or DEFAULT_BASE_URLS[config.provider]
    return url.rstrip('/')


def extract_json(text: str) -> Dict[str, Any]:
    """
    Parse the JSON object embedded in model output

    Only the span from the first '{' to the last '}' is parsed, which drops
    prose and code fences around the object.

    Raises:
        ParseFailure: If the span is not valid JSON
    """
    start = text.find('{')
    end = text.rfind('}')
    if start != -1 and end > start:
        candidate = text[start:end + 1]
    else:
        candidate = text.strip()

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.error(f"[LLM] JSON parse error: {e}, response: {text[:200]}")
        raise ParseFailure(f"JSON parse error: {e}", raw=text) from e


class LLMClient:
    """Client for one configured chat completion endpoint"""

    def __init__(self, config: APIConfig, timeout: int = 60):
        """
        Initialize client

        Args:
            config: Provider, credentials and model
            timeout: Request timeout in seconds
        """
        self.config = config
        self.base_url = resolve_base_url(config)
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json"
        }

    def chat_completion(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = 0.7,
        max_tokens: Optional[int] = None,
        json_mode: bool = True
    ) -> str:
        """
        Call the chat completion API once

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (omitted when None)
            max_tokens: Maximum tokens in response (omitted when None)
            json_mode: Ask for a JSON object response; never sent to ollama

        Returns:
            Content of the first choice

        Raises:
            ProviderError: Non-success HTTP status
            EmptyCompletion: No content in the first choice
            requests.exceptions.RequestException: Transport failure
        """
        payload: Dict[str, Any] = {
            "model": self.config.model_id,
            "messages": messages,
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if json_mode and self.config.provider != Provider.OLLAMA:
            payload["response_format"] = {"type": "json_object"}

        logger.info(f"[LLM] Request - Provider: {self.config.provider.value}, Model: {self.config.model_id}, Temperature: {temperature}")
        logger.debug(f"[LLM] Input Messages: {json.dumps(messages, ensure_ascii=False, indent=2)}")

        response = requests.post(
            self.endpoint,
            headers=self._headers(),
            json=payload,
            timeout=self.timeout
        )

        if not response.ok:
            logger.error(f"[LLM] API error {response.status_code}: {response.text[:500]}")
            raise ProviderError(response.status_code, response.text)

        result = response.json()
        choices = result.get('choices') or [{}]
        content = (choices[0].get('message') or {}).get('content') or ''

        if 'usage' in result:
            usage = result['usage']
            logger.info(f"[LLM] Token Usage - Prompt: {usage.get('prompt_tokens', 0)}, Completion: {usage.get('completion_tokens', 0)}, Total: {usage.get('total_tokens', 0)}")

        if not content:
            logger.warning("[LLM] Empty response from API")
            raise EmptyCompletion()

        logger.info(f"[LLM] Response received, length: {len(content)} chars")
        return content

    def complete_json(self, messages: List[Dict[str, str]], temperature: float = 0.7) -> Dict[str, Any]:
        """chat_completion() followed by extract_json()"""
        return extract_json(self.chat_completion(messages, temperature=temperature))
