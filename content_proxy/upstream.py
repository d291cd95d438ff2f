"""
Cliente upstream
Envuelve httpx para llamar a APIs de terceros interceptando las redirecciones,
de forma que la cabecera Authorization no se pierda en el salto
"""

import logging
from base64 import b64encode
from typing import Any, Callable, Dict, Optional

import httpx

from .models import UpstreamResult

logger = logging.getLogger(__name__)

REDIRECT_STATUS_CODES = (301, 302, 307, 308)

# Devuelve los kwargs del cuerpo para httpx (json=, files=, data=...).
# Es una función y no un cuerpo ya construido porque un multipart no se puede reenviar dos veces.
BodyBuilder = Callable[[], Dict[str, Any]]


def encode_basic_auth(username: str, app_password: str) -> str:
    """Crea el valor de la cabecera Authorization para Basic Auth"""
    credentials = f"{username}:{app_password}"
    token = b64encode(credentials.encode()).decode('ascii')
    return f"Basic {token}"


def extract_error_message(payload: Any) -> Optional[str]:
    """Extrae el mensaje de error de un cuerpo JSON ({error: {message}}, {error: "..."} o {message})"""
    if not isinstance(payload, dict):
        return None

    error = payload.get('error')
    if isinstance(error, dict) and error.get('message'):
        return str(error['message'])
    if isinstance(error, str) and error:
        return error
    if payload.get('message'):
        return str(payload['message'])
    return None


def error_message_from_response(response: Any, fallback: str) -> str:
    """Mensaje de error de una respuesta de httpx o requests, o el fallback si no es JSON"""
    try:
        payload = response.json()
    except ValueError:
        return fallback
    return extract_error_message(payload) or fallback


class UpstreamClient:
    """Cliente HTTP que sigue a mano un único salto de redirección conservando la autorización"""

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    def _client(self, follow_redirects: bool = False) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=follow_redirects
        )

    async def send(self, method: str, url: str, headers: Optional[Dict[str, str]] = None,
                   body: Optional[BodyBuilder] = None, params: Optional[Dict[str, Any]] = None,
                   follow_redirects: bool = True) -> UpstreamResult:
        """
        Realiza la petición y devuelve siempre un UpstreamResult (nunca lanza)

        Args:
            method: Método HTTP
            url: URL de destino
            headers: Cabeceras, incluida la de autorización
            body: Función que construye los kwargs del cuerpo; se invoca de nuevo si hay redirección
            params: Query string (solo en la primera petición; la redirección trae la suya)
            follow_redirects: Si se sigue un único 301/302/307/308 con Location

        Returns:
            UpstreamResult con el JSON de la respuesta o el mensaje de error
        """
        headers = dict(headers or {})

        try:
            async with self._client() as client:
                logger.info(f"➡️  {method} {url}")
                response = await client.request(
                    method, url, headers=headers, params=params, **(body() if body else {})
                )

                location = response.headers.get('location')
                if follow_redirects and response.status_code in REDIRECT_STATUS_CODES and location:
                    target = str(response.url.join(location))
                    logger.info(f"↪️  Redirección {response.status_code}: {url} -> {target}")

                    redirect_headers = dict(headers)
                    if 'Authorization' in headers:
                        redirect_headers['Authorization'] = headers['Authorization']

                    response = await client.request(
                        method, target, headers=redirect_headers, **(body() if body else {})
                    )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"❌ Error de red en {method} {url}: {e!r}")
            return UpstreamResult.failure(500, str(e) or e.__class__.__name__)

        return self._to_result(response)

    def _to_result(self, response: httpx.Response) -> UpstreamResult:
        if response.is_success:
            if not response.content:
                return UpstreamResult.success(response.status_code, None)
            try:
                return UpstreamResult.success(response.status_code, response.json())
            except ValueError:
                return UpstreamResult.failure(500, f"Invalid JSON response from {response.url}")

        message = error_message_from_response(
            response, f"Upstream request failed with status {response.status_code}"
        )
        logger.warning(f"⚠️ Upstream respondió {response.status_code}: {message}")
        return UpstreamResult.failure(response.status_code, message)

    async def fetch_bytes(self, url: str) -> bytes:
        """Descarga un recurso siguiendo redirecciones normales; lanza httpx.HTTPError si falla"""
        async with self._client(follow_redirects=True) as client:
            logger.info(f"⬇️  GET {url}")
            response = await client.get(url)
            response.raise_for_status()
            return response.content
