import httpx

from mangagate.client import create_http_client


async def test_client_has_no_global_timeout():
    async with create_http_client() as client:
        assert client.timeout == httpx.Timeout(None)
        assert client.follow_redirects is True


async def test_client_uses_given_transport():
    transport = httpx.MockTransport(lambda request: httpx.Response(204))

    async with create_http_client(transport) as client:
        response = await client.get("https://api.test/ping")

    assert response.status_code == 204
