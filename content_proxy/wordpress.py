"""
Cliente de WordPress
Resolución de categorías, subida de imágenes destacadas y creación de borradores usando Basic Auth
"""

import logging
import re
from typing import Any, Dict, Optional

import httpx

from .models import Category, DraftPost, MediaItem, ProxyError, SiteCredentials
from .upstream import UpstreamClient, encode_basic_auth

logger = logging.getLogger(__name__)

FILENAME_FALLBACK = "image"
FILENAME_SUFFIX = "-featured"
FILENAME_MAX_LENGTH = 50
ADMIN_EDIT_PATH = "/wp-admin/post.php?post={post_id}&action=edit"


def media_filename(title: Optional[str]) -> str:
    """Nombre de fichero seguro a partir del título: solo alfanuméricos, máximo 50 caracteres"""
    base = re.sub(r'[^A-Za-z0-9]', '', title or FILENAME_FALLBACK)[:FILENAME_MAX_LENGTH]
    return f"{base}{FILENAME_SUFFIX}.jpg"


class WordPressAPI:
    """Cliente para interactuar con el REST API de WordPress"""

    def __init__(self, credentials: SiteCredentials, upstream: UpstreamClient):
        self.credentials = credentials
        self.upstream = upstream

        self.headers = {
            'Authorization': encode_basic_auth(credentials.username, credentials.app_password),
            'Accept': 'application/json'
        }

    # === Categorías ===
    async def resolve_category(self, name: str) -> Category:
        """
        Busca una categoría por nombre exacto (sin distinguir mayúsculas) y la crea si no existe

        Args:
            name: Nombre de la categoría

        Returns:
            La categoría existente o la recién creada
        """
        search = await self.upstream.send(
            'GET',
            self.credentials.api_url('/categories'),
            headers=self.headers,
            params={'search': name, 'per_page': 100}
        )

        # Si la búsqueda falla se trata como "no encontrada"
        if search.ok and isinstance(search.data, list):
            for cat in search.data:
                if isinstance(cat, dict) and str(cat.get('name', '')).lower() == name.lower():
                    logger.info(f"📁 Categoría existente: {cat['name']} ({cat['id']})")
                    return Category(id=cat['id'], name=cat['name'])
        elif not search.ok:
            logger.warning(f"Búsqueda de categoría '{name}' falló ({search.status_code}), se intentará crearla")

        created = (await self.upstream.send(
            'POST',
            self.credentials.api_url('/categories'),
            headers=self.headers,
            body=lambda: {'json': {'name': name}}
        )).unwrap()

        logger.info(f"📁 Categoría creada: {created['name']} ({created['id']})")
        return Category(id=created['id'], name=created['name'])

    # === Media ===
    async def upload_media(self, image_url: str, title: Optional[str] = None) -> MediaItem:
        """
        Descarga una imagen remota y la sube a la biblioteca de medios

        El título, si se indica, se aplica después como title y alt text; ese
        segundo paso puede fallar sin afectar al resultado.
        """
        if not image_url.startswith(('http://', 'https://')):
            raise ProxyError(400, f"Invalid image URL: {image_url}")

        try:
            image_data = await self.upstream.fetch_bytes(image_url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"❌ No se pudo descargar la imagen {image_url}: {e}")
            raise ProxyError(400, f"Failed to fetch image from {image_url}: {e}")

        filename = media_filename(title)
        logger.info(f"🖼️  Subiendo {filename} ({len(image_data)} bytes)")

        def body() -> Dict[str, Any]:
            return {'files': {'file': (filename, image_data, 'image/jpeg')}}

        media = (await self.upstream.send(
            'POST',
            self.credentials.api_url('/media'),
            headers=self.headers,
            body=body
        )).unwrap()

        if title:
            update = await self.upstream.send(
                'POST',
                self.credentials.api_url(f"/media/{media['id']}"),
                headers=self.headers,
                body=lambda: {'json': {'alt_text': title, 'title': title}}
            )
            if not update.ok:
                logger.warning(f"⚠️ No se pudo actualizar alt text de media {media['id']}: {update.error}")

        return MediaItem(id=media['id'], source_url=media.get('source_url'))

    # === Posts ===
    async def create_post(self, title: str, content: str,
                          featured_media_id: Optional[int] = None,
                          category_id: Optional[int] = None) -> Dict[str, Any]:
        """Crea un post en borrador y devuelve id, link y adminLink"""
        if not title or not content:
            raise ProxyError(400, "Title and content are required")

        post = DraftPost(
            title=title,
            content=content,
            featured_media_id=featured_media_id,
            category_ids=[category_id] if category_id else None
        )

        result = (await self.upstream.send(
            'POST',
            self.credentials.api_url('/posts'),
            headers=self.headers,
            body=lambda: {'json': post.to_payload()}
        )).unwrap()

        post_id = result['id']
        logger.info(f"📝 Borrador creado: {post_id}")

        return {
            'id': post_id,
            'link': result.get('link'),
            'adminLink': self.credentials.base_url + ADMIN_EDIT_PATH.format(post_id=post_id)
        }
