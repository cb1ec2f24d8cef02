"""
Text-generation adapter.

Thin wrapper over an OpenAI-compatible Chat Completions endpoint. It sends one
request (system instruction, user prompt, temperature, JSON-object response
constraint) and hands back the first candidate's text. Parsing and validation
of that text is the caller's job.
"""

from typing import Optional
import logging
import time

from openai import OpenAI, OpenAIError, APITimeoutError, RateLimitError

from app.config import Settings, settings as default_settings
from app.exceptions import UpstreamError

logger = logging.getLogger("fitva.llm")


class TextGenerationClient:
    """Chat-completions client constrained to JSON-object replies"""

    def __init__(self, config: Optional[Settings] = None, client: Optional[OpenAI] = None):
        self.config = config or default_settings
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            try:
                self._client = OpenAI(
                    api_key=self.config.openai_api_key,
                    base_url=self.config.openai_base_url,
                    timeout=self.config.llm_timeout_sec,
                    max_retries=0,
                )
            except OpenAIError as exc:
                # raised when no API key is configured
                logger.error(f"llm_client_init_failed error={exc}")
                raise UpstreamError(
                    "Nutrition provider is not configured",
                    details={"reason": str(exc)},
                ) from exc
        return self._client

    def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
    ) -> Optional[str]:
        """
        Send one chat request and return the first candidate's content.

        Args:
            system_prompt: Fixed system instruction
            user_prompt: Rendered user prompt
            temperature: Overrides the configured sampling temperature

        Returns:
            The reply text (expected to be a JSON object), or None if the
            provider returned no content

        Raises:
            UpstreamError: Network failure, timeout, rate limit or provider error
        """
        client = self._get_client()
        temperature = self.config.llm_temperature if temperature is None else temperature
        started = time.time()
        try:
            response = client.chat.completions.create(
                model=self.config.llm_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=self.config.llm_max_tokens,
                response_format={"type": "json_object"},
            )
        except APITimeoutError as exc:
            logger.warning(f"llm_timeout model={self.config.llm_model}")
            raise UpstreamError(
                "Nutrition provider timed out, please retry",
                details={"reason": "timeout"},
            ) from exc
        except RateLimitError as exc:
            logger.warning(f"llm_rate_limited model={self.config.llm_model}")
            raise UpstreamError(
                "Nutrition provider is rate limiting requests, please retry shortly",
                details={"reason": "rate_limited"},
            ) from exc
        except OpenAIError as exc:
            logger.error(f"llm_request_failed model={self.config.llm_model} error={exc}")
            raise UpstreamError(details={"reason": str(exc)}) from exc

        logger.info(
            f"llm_completed model={self.config.llm_model} "
            f"elapsed={time.time() - started:.3f}s choices={len(response.choices or [])}"
        )
        if not response.choices:
            return None
        return response.choices[0].message.content
