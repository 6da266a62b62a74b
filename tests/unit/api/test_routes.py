import io

import httpx
import pytest
import respx
from fastapi.testclient import TestClient
from PIL import Image

from mangagate.api import create_app

API = "https://api.mangadex.org"
COVER = "https://uploads.mangadex.org/covers/m1/f.jpg"


@pytest.fixture
def upstream():
    return respx.Router(assert_all_called=False)


@pytest.fixture
def client(upstream, settings):
    app = create_app(
        settings.model_copy(update={"max_retries": 2}),
        transport=httpx.MockTransport(upstream.handler),
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_lookups(upstream, make_chapter):
    """Answer the cover, author, chapter and statistics lookups for manga m1."""
    upstream.get(f"{API}/cover/c1").mock(
        return_value=httpx.Response(200, json={"data": {"attributes": {"fileName": "f.jpg"}}})
    )
    upstream.get(f"{API}/author/a1").mock(
        return_value=httpx.Response(200, json={"data": {"attributes": {"name": "Oda"}}})
    )
    upstream.get(f"{API}/chapter").mock(
        return_value=httpx.Response(200, json={"data": [make_chapter()]})
    )
    upstream.get(f"{API}/statistics/manga/m1").mock(
        return_value=httpx.Response(
            200,
            json={"statistics": {"m1": {"follows": 12_000, "rating": {"average": 9, "count": 3}}}},
        )
    )
    return upstream


def jpeg_source() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (300, 450), "blue").save(buffer, format="PNG")
    return buffer.getvalue()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_cors_is_open(client):
    response = client.get("/health", headers={"Origin": "https://reader.example"})

    assert response.headers["access-control-allow-origin"] == "*"


# --- feeds ---


def test_latest_manga(client, upstream, mock_lookups, make_manga):
    route = upstream.get(f"{API}/manga").mock(
        return_value=httpx.Response(200, json={"data": [make_manga()], "total": 1})
    )

    response = client.get("/latest-manga", params={"offset": 10})

    assert response.status_code == 200
    body = response.json()
    assert body == [
        {
            "id": "m1",
            "title": "One Piece",
            "cover": (
                "http://localhost:5000/proxy-image?url="
                "https%3A%2F%2Fuploads.mangadex.org%2Fcovers%2Fm1%2Ff.jpg.256.jpg"
            ),
            "author": "Oda",
            "chapters": [
                {
                    "id": "ch1",
                    "chapter": "1100",
                    "title": "The Promise",
                    "updatedAt": "2024-06-09T15:04:00+00:00",
                }
            ],
            "tags": ["Action", "Adventure"],
            "rating": "4.5",
            "popularityTag": "hot",
        }
    ]
    assert route.calls.last.request.url.params["offset"] == "10"


def test_latest_manga_upstream_failure(client, upstream):
    route = upstream.get(f"{API}/manga").mock(return_value=httpx.Response(500))

    response = client.get("/latest-manga")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch manga data"}
    assert route.call_count == 2


def test_latest_manga_malformed_upstream(client, upstream):
    upstream.get(f"{API}/manga").mock(return_value=httpx.Response(200, json={"result": "ok"}))

    response = client.get("/latest-manga")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch manga data"}


def test_new_manga_survives_lookup_failures(client, upstream, make_manga):
    upstream.get(f"{API}/manga").mock(
        return_value=httpx.Response(200, json={"data": [make_manga()]})
    )
    upstream.route(host="api.mangadex.org").mock(return_value=httpx.Response(503))

    response = client.get("/new-manga")

    assert response.status_code == 200
    card = response.json()[0]
    assert card["author"] == "Unknown"
    assert card["cover"] == "https://via.placeholder.com/150"
    assert card["chapters"] == []


def test_negative_offset_is_rejected(client):
    response = client.get("/latest-manga", params={"offset": -1})

    assert response.status_code == 422


# --- rankings ---


@pytest.mark.parametrize("path", ["/top-weekly", "/top-all-time"])
def test_rankings_not_found(client, upstream, path):
    upstream.get(f"{API}/manga").mock(return_value=httpx.Response(200, json={"result": "ok"}))

    response = client.get(path)

    assert response.status_code == 404
    assert response.json() == {"error": "No manga found"}


@pytest.mark.parametrize("path", ["/top-weekly", "/top-all-time"])
def test_rankings_empty(client, upstream, path):
    upstream.get(f"{API}/manga").mock(
        return_value=httpx.Response(200, json={"data": [], "total": 0})
    )

    response = client.get(path)

    assert response.status_code == 200
    assert response.json() == []


def test_top_all_time(client, upstream, mock_lookups, make_manga):
    upstream.get(f"{API}/manga").mock(
        return_value=httpx.Response(200, json={"data": [make_manga()]})
    )

    response = client.get("/top-all-time")

    assert response.status_code == 200
    entry = response.json()[0]
    assert set(entry) == {"id", "title", "chapters"}
    assert entry["chapters"]["id"] == "ch1"


# --- detail ---


def test_manga_detail(client, upstream, mock_lookups, make_manga):
    upstream.get(f"{API}/manga/m1").mock(
        return_value=httpx.Response(200, json={"data": make_manga()})
    )

    response = client.get("/manga/m1")

    assert response.status_code == 200
    detail = response.json()
    assert detail["cover"] == COVER
    assert detail["authors"] == ["Oda"]
    assert detail["status"] == "Ongoing"
    assert detail["views"] == 12_000
    assert detail["totalLikes"] == 3
    assert detail["chapters"][0]["chapterNumber"] == "1100"


def test_manga_detail_not_found(client, upstream):
    upstream.get(f"{API}/manga/m1").mock(
        return_value=httpx.Response(200, json={"result": "error"})
    )

    response = client.get("/manga/m1")

    assert response.status_code == 404
    assert response.json() == {"error": "Manga not found"}


def test_manga_detail_upstream_failure(client, upstream):
    upstream.get(f"{API}/manga/m1").mock(return_value=httpx.Response(404))

    response = client.get("/manga/m1")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch manga details"}


# --- paged lists ---


@pytest.mark.parametrize(
    ("path", "order"),
    [
        ("/new-mangas", "order[createdAt]"),
        ("/latest-mangas-list", "order[latestUploadedChapter]"),
        ("/top-mangas", "order[followedCount]"),
    ],
)
def test_paged_lists(client, upstream, mock_lookups, make_manga, path, order):
    route = upstream.get(f"{API}/manga").mock(
        return_value=httpx.Response(200, json={"data": [make_manga()], "total": 99})
    )

    response = client.get(path, params={"offset": 30, "limit": 15})

    assert response.status_code == 200
    listing = response.json()[0]
    assert listing["totalManga"] == 99
    assert listing["chapters"]["chapter"] == "1100"
    params = route.calls.last.request.url.params
    assert params[order] == "desc"
    assert params["limit"] == "15"
    assert params["offset"] == "30"


def test_list_mangas(client, upstream, mock_lookups, make_manga):
    route = upstream.get(f"{API}/manga").mock(
        return_value=httpx.Response(200, json={"data": [make_manga()], "total": 1})
    )

    response = client.get(
        "/list-mangas", params={"genres": "g1,g2", "status": "hiatus", "sort": "top-view"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["mangas"][0]["id"] == "m1"
    params = route.calls.last.request.url.params
    assert params["order[followedCount]"] == "desc"
    assert params.get_list("includedTags[]") == ["g1", "g2"]
    assert params["status[]"] == "hiatus"


def test_list_mangas_empty(client, upstream):
    upstream.get(f"{API}/manga").mock(
        return_value=httpx.Response(200, json={"data": [], "total": 0})
    )

    response = client.get("/list-mangas")

    assert response.json() == {"total": 0, "mangas": []}


def test_genres(client, upstream):
    upstream.get(f"{API}/manga/tag").mock(
        return_value=httpx.Response(
            200, json={"data": [{"id": "t1", "attributes": {"name": {"en": "Action"}}}]}
        )
    )

    response = client.get("/genres")

    assert response.json() == [{"id": "t1", "name": "Action"}]


def test_genres_failure(client, upstream):
    upstream.get(f"{API}/manga/tag").mock(side_effect=httpx.ConnectError("refused"))

    response = client.get("/genres")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch genres"}


# --- image proxy ---


def test_proxy_image(client, upstream):
    route = upstream.get(COVER).mock(return_value=httpx.Response(200, content=jpeg_source()))

    response = client.get("/proxy-image", params={"url": COVER})

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    with Image.open(io.BytesIO(response.content)) as thumbnail:
        assert thumbnail.size == (150, 225)
    assert route.calls.last.request.headers["Referer"] == "https://mangadex.org"


def test_proxy_image_upstream_failure(client, upstream):
    upstream.get(COVER).mock(return_value=httpx.Response(404))

    response = client.get("/proxy-image", params={"url": COVER})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to load image"}


def test_proxy_image_not_an_image(client, upstream):
    upstream.get(COVER).mock(return_value=httpx.Response(200, text="<html></html>"))

    response = client.get("/proxy-image", params={"url": COVER})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to load image"}


def test_proxy_image_requires_url(client):
    assert client.get("/proxy-image").status_code == 422
