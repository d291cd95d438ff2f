import httpx
import pytest

from content_proxy.config import Settings
from content_proxy.models import SiteCredentials
from content_proxy.upstream import UpstreamClient

SITE = "https://site.test"
API = f"{SITE}/wp-json/wp/v2"


class FakeUpstream:
    """Respuestas enlatadas por (método, URL sin query), registrando cada petición"""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, url, *responses):
        self.routes[(method, url)] = list(responses)

    def calls(self, method, url):
        return [r for r in self.requests if r.method == method and self._url(r) == url]

    @staticmethod
    def _url(request):
        return f"{request.url.scheme}://{request.url.host}{request.url.path}"

    def handler(self, request):
        request.read()
        self.requests.append(request)
        responses = self.routes.get((request.method, self._url(request)))
        if not responses:
            return httpx.Response(404, json={"code": "rest_no_route", "message": "No route"})

        response = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake():
    return FakeUpstream()


@pytest.fixture
def transport(fake):
    return httpx.MockTransport(fake.handler)


@pytest.fixture
def upstream(transport):
    return UpstreamClient(transport=transport)


@pytest.fixture
def credentials():
    return SiteCredentials(site_url=f"{SITE}/", username="editor", app_password="abcd efgh ijkl")


@pytest.fixture
def settings():
    return Settings(openai_api_key="sk-test", anthropic_api_key="sk-ant-test")
