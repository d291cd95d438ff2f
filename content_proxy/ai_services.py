"""
Clientes de IA
Transcripción de audio (Whisper de OpenAI) y chat con Claude (Anthropic)
"""

import logging
from typing import Any, Dict, Optional

import requests

from .models import ProxyError
from .upstream import error_message_from_response

logger = logging.getLogger(__name__)


class TranscriptionClient:
    """Cliente de transcripción usando Whisper"""

    def __init__(self, api_key: Optional[str], base_url: str = "https://api.openai.com/v1"):
        self.api_key = api_key
        self.base_url = base_url
        self.model = "whisper-1"

    def is_available(self) -> bool:
        """Verifica si hay API key configurada"""
        return bool(self.api_key)

    def transcribe(self, audio: bytes, filename: str, content_type: Optional[str] = None) -> str:
        """
        Envía el audio a Whisper y devuelve el texto plano

        Args:
            audio: Bytes del fichero de audio
            filename: Nombre original del fichero
            content_type: MIME type original

        Returns:
            Texto transcrito
        """
        if not self.is_available():
            raise ProxyError(503, "Transcription service not configured (missing OPENAI_API_KEY)")

        logger.info(f"🎙️ Transcribiendo {filename} ({len(audio)} bytes)")

        response = requests.post(
            f"{self.base_url}/audio/transcriptions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            files={"file": (filename, audio, content_type or "application/octet-stream")},
            data={"model": self.model, "response_format": "text"},
            timeout=120
        )

        if not response.ok:
            message = error_message_from_response(response, "Transcription failed")
            logger.warning(f"⚠️ Whisper respondió {response.status_code}: {message}")
            raise ProxyError(response.status_code, message)

        return response.text


class ClaudeClient:
    """Cliente del Messages API de Anthropic"""

    def __init__(self, api_key: Optional[str], model: str, max_tokens: int = 4096,
                 base_url: str = "https://api.anthropic.com/v1"):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.base_url = base_url

    def is_available(self) -> bool:
        return bool(self.api_key)

    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> Dict[str, Any]:
        """Envía el prompt a Claude y devuelve el JSON de la respuesta tal cual"""
        if not self.is_available():
            raise ProxyError(503, "Claude service not configured (missing ANTHROPIC_API_KEY)")

        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": "user", "content": prompt}
            ]
        }
        if system_prompt:
            payload["system"] = system_prompt

        logger.info(f"🤖 Enviando prompt a Claude: {prompt[:50]}...")

        response = requests.post(
            f"{self.base_url}/messages",
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": "2023-06-01",
                "Content-Type": "application/json"
            },
            json=payload,
            timeout=120
        )

        if not response.ok:
            message = error_message_from_response(response, "Claude request failed")
            logger.warning(f"⚠️ Claude respondió {response.status_code}: {message}")
            raise ProxyError(response.status_code, message)

        return response.json()
