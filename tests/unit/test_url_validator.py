import pytest

from imagechat.extraction.url_validator import safe_url


class TestSafeUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/a.png",
            "data:image/png;base64,AAAA",
            "blob:https://example.com/5d1c6b1e",
        ],
    )
    def test_allows_safe_schemes(self, url: str) -> None:
        assert safe_url(url) == url

    @pytest.mark.parametrize(
        "url",
        [
            "http://example.com/a.png",
            "javascript:alert(1)",
            "file:///etc/passwd",
            "ftp://example.com/a.png",
            "https://",
            "not a url",
            "",
            "   ",
        ],
    )
    def test_rejects_everything_else(self, url: str) -> None:
        assert safe_url(url) is None

    def test_scheme_is_case_insensitive(self) -> None:
        assert safe_url("HTTPS://example.com/a.png") == "HTTPS://example.com/a.png"

    def test_strips_surrounding_whitespace(self) -> None:
        assert safe_url("  https://example.com/a.png\n") == "https://example.com/a.png"
