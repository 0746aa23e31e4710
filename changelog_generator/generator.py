"""
Changelog generation module.

This module contains the ChangelogWriter class responsible for turning a
built prompt into changelog text through the OpenAI chat completions API,
and the packaging of that text into a GenerationResult.
"""

import datetime
import logging
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from .config import ChangelogSettings, get_settings
from .errors import GenerationBackendError
from .models import GenerationResult

logger = logging.getLogger("changelog-generator.generator")

SYSTEM_MESSAGE = "You are a helpful assistant."
FALLBACK_TEXT = "Failed to generate."


class ChangelogWriter:
    """
    Call the generation backend once per prompt.

    There is no retry, streaming or caching: each call to write() is exactly
    one chat completion request. Model and token ceiling come from the
    settings, never from the request.

    Args:
        settings: Deployment settings; defaults to the process-wide ones.
        client: Pre-built OpenAI client, mainly for tests.
    """

    def __init__(self, settings: Optional[ChangelogSettings] = None, client: Any = None) -> None:
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> Any:
        # built on first use: the OpenAI client refuses to start without a key
        if self._client is None:
            self._client = OpenAI(
                api_key=self._settings.openai_api_key,
                base_url=self._settings.openai_base_url,
                timeout=self._settings.openai_timeout,
                max_retries=0,
            )
        return self._client

    def write(self, prompt: str) -> str:
        """
        Generate changelog text for a prompt.

        Args:
            prompt: Prompt built by build_prompt()

        Returns:
            The generated text, or FALLBACK_TEXT when the backend returned none

        Raises:
            GenerationBackendError: If the backend call itself fails
        """
        logger.debug("Requesting completion from %s (%d prompt chars)", self._settings.model, len(prompt))
        try:
            response = self._get_client().chat.completions.create(
                model=self._settings.model,
                messages=[
                    {"role": "system", "content": SYSTEM_MESSAGE},
                    {"role": "user", "content": prompt},
                ],
                max_completion_tokens=self._settings.max_completion_tokens,
            )
        except OpenAIError as e:
            logger.error("Generation backend call failed: %s", e)
            raise GenerationBackendError(str(e)) from e

        text = None
        if response.choices:
            text = response.choices[0].message.content
        if not text:
            logger.warning("Generation backend returned no text, using fallback")
            return FALLBACK_TEXT

        logger.info("Generated changelog (%d chars)", len(text))
        return text


def package_result(text: str, today: Optional[datetime.date] = None) -> GenerationResult:
    """
    Wrap generated text with its title.

    The title only depends on the date, never on the request.
    """
    today = today or datetime.date.today()
    return GenerationResult(title=f"Changelog - {today.strftime('%Y-%m-%d')}", changelog=text)
