import json

import httpx
import pytest

from foodzy.services.translation import LibreTranslateService, MockTranslationService


def libretranslate(handler, api_key=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LibreTranslateService("https://translate.test/", api_key=api_key, client=client)


@pytest.mark.asyncio
async def test_translate_posts_text_request():
    seen = []

    def handler(request):
        seen.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"translatedText": "Ajouter au panier"})

    service = libretranslate(handler, api_key="k")

    assert await service.translate("Add to Cart", target="fr") == "Ajouter au panier"
    assert seen == [("/translate", {
        "q": "Add to Cart", "source": "en", "target": "fr", "format": "text", "api_key": "k",
    })]
    await service.aclose()


@pytest.mark.asyncio
async def test_translate_failures_return_original_text():
    def server_error(request):
        return httpx.Response(500, text="boom")

    def unreachable(request):
        raise httpx.ConnectError("down", request=request)

    for handler in (server_error, unreachable):
        service = libretranslate(handler)
        assert await service.translate("Menu", target="es") == "Menu"
        await service.aclose()


@pytest.mark.asyncio
async def test_same_language_makes_no_request():
    def handler(request):
        raise AssertionError("unexpected request")

    service = libretranslate(handler)

    assert await service.translate("Menu", target="en", source="en") == "Menu"
    assert await service.translate_batch(["a", "b"], target="fr", source="fr") == ["a", "b"]


@pytest.mark.asyncio
@pytest.mark.parametrize("response, expected", [
    (httpx.Response(200, json=[{"language": "fr", "confidence": 92.0}]), "fr"),
    (httpx.Response(200, json=[{"language": "de", "confidence": 90.0}]), "en"),
    (httpx.Response(200, json=[]), "en"),
    (httpx.Response(503), "en"),
])
async def test_detect(response, expected):
    service = libretranslate(lambda request: response)

    assert await service.detect("Bonjour") == expected


@pytest.mark.asyncio
async def test_batch_keeps_order():
    def handler(request):
        text = json.loads(request.content)["q"]
        return httpx.Response(200, json={"translatedText": text.upper()})

    service = libretranslate(handler)

    assert await service.translate_batch(["pizza", "sushi", "cake"], target="es") == ["PIZZA", "SUSHI", "CAKE"]


@pytest.mark.asyncio
async def test_mock_service_passes_text_through():
    service = MockTranslationService()

    assert await service.translate("Menu", target="ar") == "Menu"
    assert await service.detect("Hola") == "en"


def test_translate_routes(client):
    response = client.post("/api/translate", json={"text": "Menu", "target": "fr"})
    assert response.status_code == 200
    assert response.json() == {"text": "Menu", "source": "en", "target": "fr"}

    batch = client.post("/api/translate/batch", json={"texts": ["a", "b"], "target": "hi"})
    assert batch.json()["texts"] == ["a", "b"]

    assert client.post("/api/translate", json={"text": "x", "target": "de"}).status_code == 422
    assert client.post("/api/translate/detect", json={"text": "hello"}).json() == {"language": "en"}
