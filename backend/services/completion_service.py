import logging
import httpx
from typing import Optional, Protocol
from config import settings
from .errors import CompletionServiceError

logger = logging.getLogger(__name__)

class CompletionService(Protocol):
    async def generate(self, prompt: str) -> str:
        ...

class GeminiCompletionService:
    """Text-in, text-out client for the Gemini generateContent endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.google_api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.completion_timeout_seconds
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(self, prompt: str) -> str:
        """Send a prompt and return the model's reply text, stripped"""
        if not self.api_key:
            raise CompletionServiceError("GOOGLE_API_KEY is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint,
                    headers={"x-goog-api-key": self.api_key},
                    json={"contents": [{"parts": [{"text": prompt}]}]}
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as e:
            raise CompletionServiceError(f"Gemini returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise CompletionServiceError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            raise CompletionServiceError(f"Gemini returned invalid JSON: {e}") from e

        text = extract_text(result)
        if not text:
            raise CompletionServiceError("Gemini response contained no text")

        logger.debug(f"Gemini ({self.model}) replied with {len(text)} characters")
        return text

def extract_text(result) -> str:
    """Join the text parts of the first candidate; empty string if there are none"""
    try:
        parts = result["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict)).strip()
