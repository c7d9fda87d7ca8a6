import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from imagechat.routes.download_route import download_extension, router, sanitize_filename


def _make_client() -> TestClient:
    app = FastAPI()
    app.include_router(router)
    return TestClient(app, follow_redirects=False)


class TestSanitizeFilename:
    def test_strips_reserved_characters(self) -> None:
        assert sanitize_filename('a/b\\c:d*e?f"g<h>i|j') == "abcdefghij"

    def test_strips_trailing_dots(self) -> None:
        assert sanitize_filename("name...") == "name"

    def test_strips_control_characters(self) -> None:
        assert sanitize_filename("bad\r\nname") == "badname"

    @pytest.mark.parametrize("name", [None, "", "...", "///"])
    def test_falls_back_to_default(self, name: str | None) -> None:
        assert sanitize_filename(name) == "image"

    def test_drops_known_extension(self) -> None:
        assert sanitize_filename("photo.JPEG") == "photo"
        assert sanitize_filename("run-1.png") == "run-1"

    def test_keeps_unknown_suffix(self) -> None:
        assert sanitize_filename("v1.2") == "v1.2"


class TestDownloadExtension:
    def test_from_url_path(self) -> None:
        assert download_extension("https://e.com/a/b.webp?x=1") == ".webp"

    def test_defaults_to_png(self) -> None:
        assert download_extension("https://e.com/render?id=1") == ".png"

    def test_filename_wins(self) -> None:
        assert download_extension("https://e.com/a.png", "pic.jpeg") == ".jpg"


class TestDownloadRoute:
    def test_redirects_with_attachment_header(self) -> None:
        response = _make_client().get(
            "/api/download",
            params={"url": "https://cdn.example.com/a/b.jpg", "filename": "my:cat"},
        )
        assert response.status_code == 307
        assert response.headers["location"] == "https://cdn.example.com/a/b.jpg"
        assert response.headers["content-disposition"] == 'attachment; filename="mycat.jpg"'
        assert response.headers["cache-control"] == "no-store"

    def test_default_filename(self) -> None:
        response = _make_client().get("/api/download", params={"url": "https://e.com/x"})
        assert response.headers["content-disposition"] == 'attachment; filename="image.png"'

    def test_missing_url(self) -> None:
        response = _make_client().get("/api/download")
        assert response.status_code == 400
        assert response.json() == {"detail": "missing url"}

    def test_rejects_non_http_url(self) -> None:
        response = _make_client().get("/api/download", params={"url": "javascript:alert(1)"})
        assert response.status_code == 400
