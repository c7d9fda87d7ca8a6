from datetime import datetime

import pytest

from imagechat.extraction.models import ImageReference
from imagechat.history.models import GenerationRun, ReviewRun


class TestGenerationRun:
    def test_to_dict(self) -> None:
        run = GenerationRun(
            primary_image=ImageReference("https://e.com/a.png"),
            duration_seconds=3.2,
            id="run-1",
            created_at=datetime(2025, 1, 2, 3, 4, 5),
        )
        assert run.to_dict() == {
            "id": "run-1",
            "ts": "2025-01-02T03:04:05",
            "durSec": 3.2,
            "url": "https://e.com/a.png",
        }

    def test_from_dict(self) -> None:
        run = GenerationRun.from_dict(
            {"id": "run-1", "ts": "2025-01-02T03:04:05", "durSec": 1, "url": "https://e.com/a.png"}
        )
        assert run.id == "run-1"
        assert run.duration_seconds == 1.0
        assert run.created_at == datetime(2025, 1, 2, 3, 4, 5)

    def test_from_dict_with_bad_timestamp(self) -> None:
        run = GenerationRun.from_dict({"id": "r", "ts": "yesterday", "url": "https://e.com/a.png"})
        assert isinstance(run.created_at, datetime)

    def test_rejects_negative_duration(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            GenerationRun(primary_image=ImageReference("https://e.com/a.png"), duration_seconds=-1)

    def test_rejects_disallowed_url(self) -> None:
        with pytest.raises(ValueError, match="disallowed URL"):
            GenerationRun(primary_image=ImageReference("javascript:alert(1)"))

    def test_ids_are_unique(self) -> None:
        image = ImageReference("https://e.com/a.png")
        assert GenerationRun(primary_image=image).id != GenerationRun(primary_image=image).id


class TestReviewRun:
    def test_to_dict(self) -> None:
        run = ReviewRun(text="<p>hi</p>", duration_seconds=1.5, id="r1", created_at=datetime(2025, 1, 1))
        assert run.to_dict() == {
            "id": "r1",
            "ts": "2025-01-01T00:00:00",
            "durSec": 1.5,
            "text": "<p>hi</p>",
        }

    def test_rejects_negative_duration(self) -> None:
        with pytest.raises(ValueError):
            ReviewRun(text="x", duration_seconds=-0.1)
