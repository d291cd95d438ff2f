"""
Configuración del proxy
Lee las variables de entorno una sola vez al arrancar el proceso
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Configuración explícita que se pasa a cada componente"""
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 3001
    claude_model: str = "claude-sonnet-4-20250514"
    claude_max_tokens: int = 4096
    log_level: str = "INFO"


def _log_level(value: str) -> str:
    """Nivel de logging válido o INFO si no se reconoce"""
    level = value.upper()
    if isinstance(logging.getLevelName(level), int):
        return level
    return 'INFO'


def load_settings() -> Settings:
    """Carga .env (si existe) y construye Settings desde el entorno"""
    load_dotenv()

    return Settings(
        openai_api_key=os.getenv('OPENAI_API_KEY') or None,
        anthropic_api_key=os.getenv('ANTHROPIC_API_KEY') or None,
        host=os.getenv('HOST', '0.0.0.0'),
        port=int(os.getenv('PORT', 3001)),
        claude_model=os.getenv('CLAUDE_MODEL', 'claude-sonnet-4-20250514'),
        claude_max_tokens=int(os.getenv('CLAUDE_MAX_TOKENS', 4096)),
        log_level=_log_level(os.getenv('LOG_LEVEL', 'INFO')),
    )
