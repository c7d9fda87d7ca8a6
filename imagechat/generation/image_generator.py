import asyncio
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from imagechat.exceptions import ImageChatError
from imagechat.extraction.extractor import ImageExtractor
from imagechat.extraction.models import ExtractionInput, ImageReference
from imagechat.extraction.response_parser import parse_payload
from imagechat.generation.progress import ProgressEstimator
from imagechat.generation.prompts import ensure_image_return
from imagechat.generation.request import ImageRequest
from imagechat.generation.retry_controller import RetryController
from imagechat.history.models import GenerationRun
from imagechat.history.store import BoundedHistoryStore
from imagechat.logging.logger import Log
from imagechat.transport.base import BaseChatTransport
from imagechat.transport.exceptions import TransportError
from imagechat.validation.forms import (
    ImageAttachment,
    ImagePromptForm,
    require_credential,
    validate_form,
)


@dataclass(frozen=True)
class GenerationResult:
    images: tuple[ImageReference, ...]
    run: GenerationRun
    retried: bool = False
    history_warning: str | None = None


@dataclass
class BatchResult:
    """Runs in completion order plus the messages of failed requests."""

    requested: int
    results: list[GenerationResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if not self.errors:
            return f"Done: {len(self.results)} image(s)"
        if not self.results:
            return self.errors[0]
        return f"Done: {len(self.results)} of {self.requested}; {self.errors[0]}"


class ImageGenerator:
    """Generates images and records each success in the run history.

    Pipeline per request: send -> parse -> extract -> (retry once) -> store.
    """

    def __init__(
        self,
        transport: BaseChatTransport,
        history: BoundedHistoryStore,
        *,
        model: str,
        max_batch_size: int = 5,
        extractor: ImageExtractor | None = None,
        retry_controller: RetryController | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._transport = transport
        self._history = history
        self._model = model
        self._max_batch_size = max_batch_size
        self._extractor = extractor or ImageExtractor()
        self._retry_controller = retry_controller or RetryController(transport, self._extractor)
        self._clock = clock

    async def generate(
        self,
        prompt: str,
        attachments: Sequence[ImageAttachment] = (),
    ) -> GenerationResult:
        """Generate one image.

        Raises:
            InputValidationError: on a bad prompt or missing credential.
            TransportError: on a non-2xx response or network failure.
            TerminalNoAssetError: when the single retry also has no image.
        """
        request = self._build_request(prompt, attachments)
        return await self._run(request)

    async def generate_batch(
        self,
        prompt: str,
        count: int,
        attachments: Sequence[ImageAttachment] = (),
        progress: ProgressEstimator | None = None,
    ) -> BatchResult:
        """Issue ``count`` independent requests concurrently.

        Each success is stored as soon as it completes, so history order is
        completion order. Failures are collected, not raised.
        """
        request = self._build_request(prompt, attachments)
        count = max(1, min(count, self._max_batch_size))
        batch = BatchResult(requested=count)
        Log.info(f"Starting batch of {count} image request(s)")

        if progress is not None:
            progress.start()
        tasks = [asyncio.ensure_future(self._run(request)) for _ in range(count)]
        try:
            for finished in asyncio.as_completed(tasks):
                try:
                    batch.results.append(await finished)
                except ImageChatError as exc:
                    Log.error(f"Batch request failed: {exc}")
                    batch.errors.append(exc.message)
        finally:
            for task in tasks:
                task.cancel()
            if progress is not None:
                await progress.stop()
        return batch

    def runs(self) -> list[GenerationRun]:
        runs: list[GenerationRun] = []
        for entry in self._history.load():
            try:
                runs.append(GenerationRun.from_dict(entry))
            except (KeyError, TypeError, ValueError) as exc:
                Log.warning(f"Skipping malformed run entry: {exc}")
        return runs

    def delete_run(self, run_id: str) -> None:
        self._history.remove(run_id)
        Log.info(f"Deleted run {run_id}")

    def _build_request(
        self,
        prompt: str,
        attachments: Sequence[ImageAttachment],
    ) -> ImageRequest:
        form = validate_form(ImagePromptForm, prompt=prompt, attachments=list(attachments))
        require_credential(self._transport.has_credential)
        return ImageRequest(
            model=self._model,
            prompt=ensure_image_return(form.prompt),
            attachment_urls=tuple(item.url for item in form.attachments),
        )

    async def _run(self, request: ImageRequest) -> GenerationResult:
        started = self._clock()
        raw = await self._transport.send(request.to_body())
        if not raw.ok:
            raise TransportError.from_response(raw)

        payload = parse_payload(raw)
        Log.payload("Image response", payload)
        images = self._extractor.extract(ExtractionInput.from_response(raw, payload))
        retried = not images
        if retried:
            images = await self._retry_controller.recover(request, images)

        run = GenerationRun(
            primary_image=images[0],
            duration_seconds=max(0.0, self._clock() - started),
        )
        appended = self._history.append(run.to_dict())
        Log.info(
            f"Generated {len(images)} image(s) in {run.duration_seconds:.1f}s"
            f"{' after retry' if retried else ''}"
        )
        return GenerationResult(
            images=images,
            run=run,
            retried=retried,
            history_warning=appended.warning,
        )
