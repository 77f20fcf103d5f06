"""
OCR relay.

Sends a photographed to-do list to a vision-language model (Mistral chat
completions) and returns the recognized tasks as plain text, one per
line. The text is not parsed beyond splitting it into lines.
"""

import base64
import logging
import mimetypes
from pathlib import Path
from typing import List, Optional

import requests

from .task_service import split_task_lines

logger = logging.getLogger(__name__)


DEFAULT_ENDPOINT = "https://api.mistral.ai/v1/chat/completions"
DEFAULT_MODEL = "mistral-small-latest"
DEFAULT_TIMEOUT = 60
DEFAULT_MIME_TYPE = "image/jpeg"

INSTRUCTION = (
    "Recognize the to-do list in the image. "
    "Return only the list of tasks, one per line, no extra explanation."
)


class OCRError(RuntimeError):
    """Recognition failed or returned nothing usable."""


class OCRRelay:
    """Client for the recognition model."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL,
                 endpoint: str = DEFAULT_ENDPOINT, timeout: float = DEFAULT_TIMEOUT):
        self.api_key = api_key
        self.model = model
        self.endpoint = endpoint
        self.timeout = timeout

    def build_payload(self, image_base64: str, mime_type: Optional[str] = None) -> dict:
        """Chat completion request body for one image."""
        image_url = f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{image_base64}"
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": INSTRUCTION},
                        {"type": "image_url", "image_url": image_url},
                    ],
                }
            ],
        }

    def recognize(self, image_base64: str, mime_type: Optional[str] = None) -> str:
        """
        Recognize the to-do list in a base64 encoded image.

        Args:
            image_base64: Image bytes, base64 encoded
            mime_type: Image MIME type, defaults to image/jpeg

        Returns:
            The model's reply text (may be empty)

        Raises:
            OCRError: If no API key is configured or the request fails
        """
        if not self.api_key:
            raise OCRError("No OCR API key configured. Add one in Settings.")

        logger.info("Received image for recognition")
        logger.debug(f"Image size (base64 chars): {len(image_base64)}, mimeType: {mime_type}")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        try:
            response = requests.post(
                self.endpoint,
                headers=headers,
                json=self.build_payload(image_base64, mime_type),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"OCR request failed: {e}")
            raise OCRError(f"Failed to process image: {e}") from e

        if response.status_code >= 300:
            message = self._extract_error(response)
            logger.error(f"OCR API error: {message}")
            raise OCRError(message)

        try:
            body = response.json()
        except ValueError as e:
            raise OCRError("Failed to process image: response was not JSON") from e
        return self._extract_content(body)

    def recognize_file(self, path: Path) -> str:
        """Recognize the to-do list in an image file."""
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise OCRError(f"Could not read {path.name}: {e}") from e
        mime_type, _ = mimetypes.guess_type(path.name)
        return self.recognize(base64.b64encode(data).decode("ascii"), mime_type)

    def recognize_tasks(self, path: Path) -> List[str]:
        """
        Recognize task descriptions in an image file.

        Raises:
            OCRError: On failure, or when no task lines were recognized
        """
        lines = split_task_lines(self.recognize_file(path))
        if not lines:
            raise OCRError("No tasks were recognized in the image.")
        return lines

    @staticmethod
    def _extract_content(body: dict) -> str:
        if not isinstance(body, dict):
            raise OCRError("Failed to process image: unexpected response")
        choices = body.get("choices") or []
        if not choices:
            return ""
        first = choices[0] if isinstance(choices, list) else None
        message = (first.get("message") or {}) if isinstance(first, dict) else None
        if not isinstance(message, dict):
            raise OCRError("Failed to process image: unexpected response")
        content = message.get("content") or ""
        if isinstance(content, list):
            # Newer models may answer with a list of typed chunks
            content = "".join(
                chunk.get("text", "") for chunk in content
                if isinstance(chunk, dict) and chunk.get("type") == "text"
            )
        if not isinstance(content, str):
            raise OCRError("Failed to process image: unexpected response")
        return content

    @staticmethod
    def _extract_error(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            msg = body.get("message") or body.get("error") or body.get("detail")
            if isinstance(msg, dict):
                msg = msg.get("message")
            if msg:
                return f"HTTP {response.status_code}: {msg}"
        return f"HTTP {response.status_code}: Failed to process image"
