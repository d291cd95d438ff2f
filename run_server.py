#!/usr/bin/env python3
"""
Arranca el proxy con uvicorn
Lee la configuración del entorno (.env incluido) una sola vez
"""

import uvicorn

from content_proxy.config import load_settings
from content_proxy.http_server import create_app


def main():
    settings = load_settings()
    app = create_app(settings)

    print("=" * 60)
    print("🚀 Content Proxy")
    print("=" * 60)
    print(f"Puerto: {settings.port}")
    print(f"Whisper disponible: {'SI' if settings.openai_api_key else 'NO'}")
    print(f"Claude disponible: {'SI' if settings.anthropic_api_key else 'NO'}")
    print()
    print("Endpoints principales:")
    print("  POST /api/transcribe            - Transcribir audio")
    print("  POST /api/claude                - Prompt a Claude")
    print("  POST /api/wordpress/categories  - Buscar o crear categoría")
    print("  POST /api/wordpress/media       - Subir imagen destacada")
    print("  POST /api/wordpress/posts       - Crear borrador")
    print()

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
