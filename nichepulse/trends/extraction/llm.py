"""LLM clients used by the format extractor."""

from typing import Optional, Sequence
import logging

from google import genai
from google.genai import types
from openai import AsyncOpenAI


logger = logging.getLogger(__name__)


class OpenAIVisionModel:
    """
    Multimodal chat-completions client for the vision tier.
    Images are passed as data URIs alongside a single text prompt.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        max_tokens: int = 2000,
        temperature: float = 0.4,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client: Optional[AsyncOpenAI] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy load the OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise ValueError("OPENAI_API_KEY not set")
            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def complete(self, prompt: str, images: Sequence[str]) -> str:
        """
        Send one user message with text plus images.

        Args:
            prompt: Instruction text
            images: data: URIs (or http URLs) of the images

        Returns:
            The reply text, empty if the model returned nothing
        """
        content = [{"type": "text", "text": prompt}]
        content.extend(
            {"type": "image_url", "image_url": {"url": image, "detail": "low"}}
            for image in images
        )

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": content}],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        return response.choices[0].message.content or ""


class GeminiTextModel:
    """
    Gemini text client for the text tier.
    Models are tried in order until one answers.
    """

    def __init__(
        self,
        api_key: Optional[str],
        models: Sequence[str] = ("gemini-2.5-flash", "gemini-2.0-flash", "gemini-1.5-flash"),
        temperature: float = 0.5,
    ):
        self.api_key = api_key
        self.models = list(models)
        self.temperature = temperature
        self._client: Optional[genai.Client] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> genai.Client:
        """Lazy load the Gemini client."""
        if self._client is None:
            if not self.api_key:
                raise ValueError("GEMINI_API_KEY not set")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def complete(self, prompt: str) -> str:
        """
        Generate text, falling through the model list on errors.

        Raises:
            RuntimeError: If every model failed
        """
        last_error: Optional[Exception] = None
        for model in self.models:
            try:
                logger.info(f"Trying Gemini model: {model}")
                response = await self.client.aio.models.generate_content(
                    model=model,
                    contents=prompt,
                    config=types.GenerateContentConfig(temperature=self.temperature),
                )
                text = response.text or ""
                if text:
                    logger.info(f"Success with Gemini model: {model}")
                    return text
                logger.warning(f"Gemini model {model} returned an empty response")
            except Exception as e:
                last_error = e
                logger.warning(f"Gemini model {model} failed: {str(e)[:100]}")

        raise RuntimeError(f"All Gemini models failed: {last_error}")
