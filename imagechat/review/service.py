import time
from collections.abc import Callable

from imagechat.chat.exceptions import EmptyReplyError
from imagechat.extraction.extractor import collect_text_chunks
from imagechat.extraction.response_parser import parse_payload
from imagechat.history.models import ReviewRun
from imagechat.history.storage import BaseStorage
from imagechat.history.store import BoundedHistoryStore
from imagechat.logging.logger import Log
from imagechat.review.html_extractor import extract_html_content
from imagechat.review.prompts import build_rewrite_prompt
from imagechat.transport.base import BaseChatTransport
from imagechat.transport.exceptions import TransportError
from imagechat.validation.exceptions import InputValidationError
from imagechat.validation.forms import ReviewForm, require_credential, validate_form

TEMPLATE_KEY = "reference-template"


class ReviewService:
    """Rewrites an app description in the style of a reference review."""

    def __init__(
        self,
        transport: BaseChatTransport,
        history: BoundedHistoryStore,
        storage: BaseStorage,
        *,
        model: str,
        temperature: float = 0.7,
        top_p: float = 0.9,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._transport = transport
        self._history = history
        self._storage = storage
        self._model = model
        self._temperature = temperature
        self._top_p = top_p
        self._clock = clock
        self.last_warning: str | None = None

    async def rewrite(self, article: str, reference_article: str) -> ReviewRun:
        """Generate a review and store the cleaned HTML as a run.

        Raises:
            InputValidationError: on missing input or credential.
            TransportError: on a non-2xx response or network failure.
            EmptyReplyError: if the response carries no text.
        """
        form = validate_form(ReviewForm, article=article, reference_article=reference_article)
        require_credential(self._transport.has_credential)

        started = self._clock()
        raw = await self._transport.send(
            {
                "model": self._model,
                "messages": [
                    {
                        "role": "user",
                        "content": build_rewrite_prompt(form.article, form.reference_article),
                    }
                ],
                "temperature": self._temperature,
                "top_p": self._top_p,
            }
        )
        if not raw.ok:
            raise TransportError.from_response(raw)

        payload = parse_payload(raw)
        text = "".join(chunk.text for chunk in collect_text_chunks(payload))
        if not text:
            raise EmptyReplyError()

        run = ReviewRun(
            text=extract_html_content(text),
            duration_seconds=max(0.0, self._clock() - started),
        )
        result = self._history.append(run.to_dict())
        self.last_warning = result.warning
        if result.warning:
            Log.warning(result.warning)
        Log.info(f"Review rewritten in {run.duration_seconds:.1f}s ({len(run.text)} chars)")
        return run

    def runs(self) -> list[dict[str, object]]:
        return self._history.load()

    def delete_run(self, run_id: str) -> None:
        self._history.remove(run_id)

    def save_template(self, reference_article: str) -> None:
        if not reference_article.strip():
            raise InputValidationError("reference review is empty")
        self._storage.set_item(TEMPLATE_KEY, reference_article)

    def load_template(self) -> str | None:
        return self._storage.get_item(TEMPLATE_KEY)
