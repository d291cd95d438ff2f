"""
Modelos del Proxy
Modelos de datos para las peticiones entrantes, las entidades de WordPress y los resultados upstream
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Any, Dict
from dataclasses import dataclass, field


class ProxyError(Exception):
    """Error que se traduce a una respuesta {"error": message} con su status HTTP"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


# === Entidades internas ===

@dataclass
class SiteCredentials:
    """Credenciales de un sitio WordPress, válidas solo durante la petición"""
    site_url: str
    username: str
    app_password: str = field(repr=False)

    @property
    def base_url(self) -> str:
        """URL del sitio sin (una) barra final"""
        if self.site_url.endswith('/'):
            return self.site_url[:-1]
        return self.site_url

    def api_url(self, endpoint: str) -> str:
        return f"{self.base_url}/wp-json/wp/v2{endpoint}"


@dataclass
class Category:
    id: int
    name: str


@dataclass
class MediaItem:
    id: int
    source_url: str


@dataclass
class DraftPost:
    """Post en borrador; los campos opcionales no se envían si están vacíos"""
    title: str
    content: str
    status: str = "draft"
    featured_media_id: Optional[int] = None
    category_ids: Optional[List[int]] = None

    def to_payload(self) -> Dict[str, Any]:
        data = {
            'title': self.title,
            'content': self.content,
            'status': self.status
        }
        if self.featured_media_id:
            data['featured_media'] = self.featured_media_id
        if self.category_ids:
            data['categories'] = self.category_ids
        return data


@dataclass
class UpstreamResult:
    """Resultado de una llamada upstream: JSON parseado o mensaje de error, con el status original"""
    ok: bool
    status_code: int
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, status_code: int, data: Any) -> "UpstreamResult":
        return cls(ok=True, status_code=status_code, data=data)

    @classmethod
    def failure(cls, status_code: int, error: str) -> "UpstreamResult":
        return cls(ok=False, status_code=status_code, error=error)

    def unwrap(self) -> Any:
        """Devuelve el cuerpo o lanza ProxyError con el status upstream"""
        if not self.ok:
            raise ProxyError(self.status_code, self.error)
        return self.data


# === Modelos de Request ===

class WordPressRequest(BaseModel):
    """Campos comunes a todas las peticiones de WordPress"""
    site_url: str = Field(alias="siteUrl", description="URL del sitio WordPress")
    username: str = Field(description="Usuario de WordPress")
    app_password: str = Field(alias="appPassword", description="Application password")

    @field_validator('site_url')
    @classmethod
    def check_site_url(cls, value: str) -> str:
        if not value.startswith(('http://', 'https://')):
            raise ValueError(f"Invalid site URL: {value}")
        return value

    def credentials(self) -> SiteCredentials:
        return SiteCredentials(self.site_url, self.username, self.app_password)


class CategoryRequest(WordPressRequest):
    category_name: str = Field(alias="categoryName", description="Nombre de la categoría")


class MediaRequest(WordPressRequest):
    image_url: str = Field(alias="imageUrl", description="URL de la imagen a subir")
    title: Optional[str] = Field(default=None, description="Título y alt text de la imagen")


class PostRequest(WordPressRequest):
    title: str = Field(description="Título del post")
    content: str = Field(description="Contenido HTML del post")
    featured_image_id: Optional[int] = Field(default=None, alias="featuredImageId")
    category_id: Optional[int] = Field(default=None, alias="categoryId")


class ClaudeRequest(BaseModel):
    prompt: Optional[str] = None
    system_prompt: Optional[str] = Field(default=None, alias="systemPrompt")
