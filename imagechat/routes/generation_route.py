from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from imagechat.exceptions import ImageChatError
from imagechat.generation.image_generator import GenerationResult
from imagechat.generation.progress import ProgressEstimator
from imagechat.routes.errors import to_http_exception
from imagechat.validation.forms import ImageAttachment

router = APIRouter(prefix="/api")


class GeneratePayload(BaseModel):
    prompt: str = ""
    attachments: list[ImageAttachment] = Field(default_factory=list)


class BatchPayload(GeneratePayload):
    count: int = 1


def _result_body(result: GenerationResult) -> dict[str, object]:
    return {
        "images": [image.url for image in result.images],
        "run": result.run.to_dict(),
        "retried": result.retried,
        "warning": result.history_warning,
    }


@router.post("/generate")
async def generate(request: Request, payload: GeneratePayload):
    """Generate one image and return its URLs and stored run."""
    generator = request.app.state.image_generator
    try:
        result = await generator.generate(payload.prompt, payload.attachments)
    except ImageChatError as exc:
        raise to_http_exception(exc) from exc
    return _result_body(result)


@router.post("/batch")
async def generate_batch(request: Request, payload: BatchPayload):
    """Generate ``count`` images concurrently; partial failures are reported."""
    generator = request.app.state.image_generator
    progress = ProgressEstimator(batch_size=payload.count)
    request.app.state.progress = progress
    try:
        batch = await generator.generate_batch(
            payload.prompt,
            payload.count,
            payload.attachments,
            progress=progress,
        )
    except ImageChatError as exc:
        raise to_http_exception(exc) from exc
    if not batch.results:
        raise HTTPException(status_code=502, detail=batch.message)
    return {
        "message": batch.message,
        "results": [_result_body(result) for result in batch.results],
        "errors": batch.errors,
    }


@router.get("/runs")
async def list_runs(request: Request):
    return [run.to_dict() for run in request.app.state.image_generator.runs()]


@router.delete("/runs/{run_id}")
async def delete_run(request: Request, run_id: str):
    request.app.state.image_generator.delete_run(run_id)
    return {"ok": True}


@router.get("/progress")
async def batch_progress(request: Request):
    """Estimated progress of the latest batch, polled while it runs."""
    progress = getattr(request.app.state, "progress", None)
    if progress is None:
        return {"percent": 0.0, "running": False}
    return {"percent": progress.percent, "running": progress.running}
