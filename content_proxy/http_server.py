"""
Servidor HTTP del proxy
Expone transcripción, chat con Claude y WordPress como endpoints JSON,
inyectando las credenciales que guarda el servidor
"""

import logging
from typing import Optional

import httpx
from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .ai_services import ClaudeClient, TranscriptionClient
from .config import Settings, load_settings
from .models import CategoryRequest, ClaudeRequest, MediaRequest, PostRequest, ProxyError
from .upstream import UpstreamClient
from .wordpress import WordPressAPI

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None,
               transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """
    Crea la aplicación con sus clientes ya configurados

    Args:
        settings: Configuración; si no se indica se lee del entorno
        transport: Transporte httpx alternativo para las llamadas a WordPress
    """
    settings = settings or load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app = FastAPI(
        title="Content Proxy",
        description="Proxy de transcripción, Claude y WordPress",
        version=__version__
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    transcriber = TranscriptionClient(settings.openai_api_key)
    claude = ClaudeClient(settings.anthropic_api_key, settings.claude_model, settings.claude_max_tokens)
    upstream = UpstreamClient(transport=transport)

    logger.info(f"Transcripción disponible: {transcriber.is_available()}")
    logger.info(f"Claude disponible: {claude.is_available()}")

    # === Manejo de errores ===

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = [str(err['loc'][-1]) for err in exc.errors() if err.get('loc')]
        message = "Invalid request body"
        if fields:
            message = f"Missing or invalid fields: {', '.join(fields)}"
        return JSONResponse(status_code=400, content={"error": message})

    # === Endpoints de Salud ===

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    # === Endpoints de IA ===

    @app.post("/api/transcribe")
    def transcribe(file: Optional[UploadFile] = File(None)):
        """Reenvía un fichero de audio a Whisper y devuelve {transcription}"""
        if file is None:
            raise ProxyError(400, "No audio file provided")

        try:
            text = transcriber.transcribe(
                audio=file.file.read(),
                filename=file.filename or "audio",
                content_type=file.content_type
            )
            return {"transcription": text}
        except ProxyError:
            raise
        except Exception as e:
            logger.error(f"❌ Error de transcripción: {e}")
            raise ProxyError(500, str(e))

    @app.post("/api/claude")
    def ask_claude(request: ClaudeRequest):
        """Reenvía el prompt a Claude y devuelve la respuesta original"""
        if not request.prompt:
            raise ProxyError(400, "Prompt is required")

        try:
            return claude.complete(request.prompt, request.system_prompt)
        except ProxyError:
            raise
        except Exception as e:
            logger.error(f"❌ Error llamando a Claude: {e}")
            raise ProxyError(500, str(e))

    # === Endpoints de WordPress ===

    @app.post("/api/wordpress/categories")
    async def resolve_category(request: CategoryRequest):
        """Devuelve la categoría con ese nombre, creándola si no existe"""
        if not request.category_name:
            raise ProxyError(400, "Category name is required")

        try:
            wp = WordPressAPI(request.credentials(), upstream)
            category = await wp.resolve_category(request.category_name)
            return {"id": category.id, "name": category.name}
        except ProxyError:
            raise
        except Exception as e:
            logger.error(f"❌ Error resolviendo categoría: {e}")
            raise ProxyError(500, str(e))

    @app.post("/api/wordpress/media")
    async def upload_media(request: MediaRequest):
        """Sube una imagen remota a la biblioteca de medios"""
        try:
            wp = WordPressAPI(request.credentials(), upstream)
            media = await wp.upload_media(request.image_url, request.title)
            return {"id": media.id, "url": media.source_url}
        except ProxyError:
            raise
        except Exception as e:
            logger.error(f"❌ Error subiendo imagen: {e}")
            raise ProxyError(500, str(e))

    @app.post("/api/wordpress/posts")
    async def create_post(request: PostRequest):
        """Crea un post en borrador"""
        try:
            wp = WordPressAPI(request.credentials(), upstream)
            return await wp.create_post(
                title=request.title,
                content=request.content,
                featured_media_id=request.featured_image_id,
                category_id=request.category_id
            )
        except ProxyError:
            raise
        except Exception as e:
            logger.error(f"❌ Error creando post: {e}")
            raise ProxyError(500, str(e))

    return app
