from imagechat.extraction.text_scanner import (
    extract_data_uris,
    extract_image_urls_from_text,
)


class TestExtractImageUrlsFromText:
    def test_markdown_image_then_bare_link(self) -> None:
        text = "![pic](https://example.com/a.png) more text http://x.io/b.jpg,"
        assert extract_image_urls_from_text(text) == [
            "https://example.com/a.png",
            "http://x.io/b.jpg",
        ]

    def test_strips_trailing_prose_punctuation(self) -> None:
        text = "See https://example.com/a.png. Or https://example.com/b.png!"
        assert extract_image_urls_from_text(text) == [
            "https://example.com/a.png",
            "https://example.com/b.png",
        ]

    def test_stops_at_full_width_punctuation(self) -> None:
        text = "图片：https://example.com/a.png，谢谢"
        assert extract_image_urls_from_text(text) == ["https://example.com/a.png"]

    def test_markdown_target_without_extension_is_kept(self) -> None:
        text = "![img](https://cdn.example.com/render?id=42)"
        assert extract_image_urls_from_text(text) == ["https://cdn.example.com/render?id=42"]

    def test_deduplicates_preserving_order(self) -> None:
        text = "https://e.com/2.png ![x](https://e.com/1.png) https://e.com/2.png"
        assert extract_image_urls_from_text(text) == [
            "https://e.com/1.png",
            "https://e.com/2.png",
        ]

    def test_empty_text(self) -> None:
        assert extract_image_urls_from_text("") == []

    def test_text_without_urls(self) -> None:
        assert extract_image_urls_from_text("no links here") == []


class TestExtractDataUris:
    def test_returns_literal_verbatim(self) -> None:
        literal = "data:image/png;base64,iVBORw0KGgo+/AAAA=="
        assert extract_data_uris(f"![x]({literal}) trailing") == [literal]

    def test_accepts_jpeg_and_webp(self) -> None:
        text = "data:image/jpeg;base64,AAAA data:image/webp;base64,BBBB"
        assert extract_data_uris(text) == [
            "data:image/jpeg;base64,AAAA",
            "data:image/webp;base64,BBBB",
        ]

    def test_ignores_non_image_data_uri(self) -> None:
        assert extract_data_uris("data:text/plain;base64,AAAA") == []

    def test_empty_text(self) -> None:
        assert extract_data_uris("") == []
