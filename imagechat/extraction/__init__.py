from imagechat.extraction.extractor import ImageExtractor, collect_text_chunks
from imagechat.extraction.models import (
    ExtractedAsset,
    ExtractionInput,
    ImageReference,
    RawResponse,
    TextChunk,
)
from imagechat.extraction.response_parser import parse_payload
from imagechat.extraction.url_validator import safe_url

__all__ = [
    "ExtractedAsset",
    "ExtractionInput",
    "ImageExtractor",
    "ImageReference",
    "RawResponse",
    "TextChunk",
    "collect_text_chunks",
    "parse_payload",
    "safe_url",
]
