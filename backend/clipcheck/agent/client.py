"""Inference client for the local llama.cpp server

Sends one chat completion per call to the OpenAI-compatible endpoint and
returns the parsed, schema-validated response model. Transport and parsing
failures are mapped onto the ClipCheck inference error taxonomy; nothing is
retried here.
"""

import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar

import openai
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion
from pydantic import BaseModel, ValidationError

from ..config import InferenceConfig
from ..errors import (
    InferenceRequestFailed,
    InferenceResponseMalformed,
    InferenceTimeout,
    InferenceUnavailable,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class InferenceClient:
    """Structured-output client for the local completion endpoint"""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8080/v1",
        model: str = "phi-3.5",
        api_key: str = "no-key",
        temperature: float = 0.2,
        top_k: int = 50,
        top_p: float = 0.95,
        max_tokens: Optional[int] = None,
        timeout: float = 60.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize the inference client.

        Args:
            base_url: OpenAI-compatible base URL of the local server
            model: Model name sent with each request
            api_key: Placeholder key (local inference doesn't check it)
            temperature: Sampling temperature
            top_k: Top-k sampling (llama.cpp extension, sent in the body)
            top_p: Nucleus sampling
            max_tokens: Optional cap on generated tokens
            timeout: Per-call timeout in seconds
            client: Preconfigured AsyncOpenAI instance (tests)
        """
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.top_k = top_k
        self.top_p = top_p
        self.max_tokens = max_tokens
        self.timeout = timeout

        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

        logger.info(f"Initialized InferenceClient with model: {model} at {base_url}")

    @classmethod
    def from_config(cls, config: InferenceConfig) -> "InferenceClient":
        return cls(
            base_url=config.base_url,
            model=config.model,
            api_key=config.api_key,
            temperature=config.temperature,
            top_k=config.top_k,
            top_p=config.top_p,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
        )

    def build_request(
        self,
        system_prompt: str,
        user_prompt: str,
        response_model: Type[BaseModel],
    ) -> Dict[str, Any]:
        """
        Build the chat completion keyword arguments.

        Args:
            system_prompt: Fixed role instruction of the calling agent
            user_prompt: Per-call prompt built by the agent
            response_model: Expected output shape

        Returns:
            Keyword arguments for chat.completions.create
        """
        request = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
            "top_p": self.top_p,
            "stream": False,
            # llama.cpp honours the schema as a grammar; still re-validated below
            "response_format": {
                "type": "json_object",
                "schema": response_model.model_json_schema(),
            },
            "extra_body": {"top_k": self.top_k},
        }
        if self.max_tokens:
            request["max_tokens"] = self.max_tokens
        return request

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        response_model: Type[ModelT],
    ) -> ModelT:
        """
        Run one completion and validate the result.

        Args:
            system_prompt: Fixed role instruction of the calling agent
            user_prompt: Per-call prompt built by the agent
            response_model: Pydantic model the JSON content must satisfy

        Returns:
            Validated response_model instance

        Raises:
            InferenceUnavailable: Server unreachable
            InferenceTimeout: Call exceeded the timeout
            InferenceRequestFailed: Non-2xx status
            InferenceResponseMalformed: Content missing, not JSON, or off-schema
        """
        request = self.build_request(system_prompt, user_prompt, response_model)

        try:
            response = await self.client.chat.completions.create(**request)
        except openai.APITimeoutError as e:
            logger.error(f"Inference call timed out after {self.timeout}s")
            raise InferenceTimeout(f"Inference request timed out after {self.timeout}s") from e
        except openai.APIConnectionError as e:
            logger.error(f"Inference server unreachable at {self.base_url}: {e}")
            raise InferenceUnavailable(f"Inference server unreachable: {e}") from e
        except openai.APIStatusError as e:
            logger.error(f"Inference request failed with status {e.status_code}")
            raise InferenceRequestFailed(
                f"LLM request failed with status {e.status_code}",
                status_code=e.status_code,
            ) from e
        except (json.JSONDecodeError, openai.APIResponseValidationError) as e:
            logger.error(f"Inference server returned an unreadable body: {e}")
            raise InferenceResponseMalformed("Invalid response body from LLM server") from e

        if not isinstance(response, ChatCompletion):
            logger.error(f"Expected a chat completion, got {type(response).__name__}")
            raise InferenceResponseMalformed(
                "Invalid response body from LLM server", content=str(response)[:500]
            )

        choices = getattr(response, "choices", None)
        if not choices or choices[0].message.content is None:
            raise InferenceResponseMalformed("Response contained no message content")

        content = choices[0].message.content
        logger.debug(f"{response_model.__name__} raw response: {content[:500]}")

        return parse_structured(content, response_model)

    async def ping(self) -> bool:
        """Check whether the inference server answers"""
        try:
            await self.client.models.list()
            return True
        except openai.APIError as e:
            logger.warning(f"Inference server ping failed: {e}")
            return False

    async def close(self) -> None:
        await self.client.close()


def extract_json(content: str) -> str:
    """Strip a surrounding markdown code fence, if any"""
    text = content.strip()
    if text.startswith("```"):
        lines = text.splitlines()[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text


def parse_structured(content: str, response_model: Type[ModelT]) -> ModelT:
    """
    Parse model output text as JSON and validate it.

    Args:
        content: Raw message content
        response_model: Expected output shape

    Returns:
        Validated response_model instance

    Raises:
        InferenceResponseMalformed: Not JSON, not an object, or schema mismatch
    """
    try:
        data = json.loads(extract_json(content))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse {response_model.__name__} JSON: {e}")
        raise InferenceResponseMalformed("Invalid response format from LLM", content=content) from e

    if not isinstance(data, dict):
        raise InferenceResponseMalformed(
            f"Expected a JSON object, got {type(data).__name__}", content=content
        )

    try:
        return response_model.model_validate(data)
    except ValidationError as e:
        logger.error(f"{response_model.__name__} failed schema validation: {e}")
        raise InferenceResponseMalformed(
            f"Response does not match {response_model.__name__} schema", content=content
        ) from e
