from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from imagechat.exceptions import ImageChatError
from imagechat.routes.errors import to_http_exception

router = APIRouter(prefix="/api/review")


class ReviewPayload(BaseModel):
    article: str = ""
    reference_article: str = ""


class TemplatePayload(BaseModel):
    reference_article: str = ""


@router.post("")
async def rewrite(request: Request, payload: ReviewPayload):
    try:
        run = await request.app.state.review_service.rewrite(
            payload.article, payload.reference_article
        )
    except ImageChatError as exc:
        raise to_http_exception(exc) from exc
    return {**run.to_dict(), "warning": request.app.state.review_service.last_warning}


@router.get("/runs")
async def list_review_runs(request: Request):
    return request.app.state.review_service.runs()


@router.delete("/runs/{run_id}")
async def delete_review_run(request: Request, run_id: str):
    request.app.state.review_service.delete_run(run_id)
    return {"ok": True}


@router.get("/template")
async def load_template(request: Request):
    template = request.app.state.review_service.load_template()
    if template is None:
        raise HTTPException(status_code=404, detail="no saved template")
    return {"reference_article": template}


@router.put("/template")
async def save_template(request: Request, payload: TemplatePayload):
    try:
        request.app.state.review_service.save_template(payload.reference_article)
    except ImageChatError as exc:
        raise to_http_exception(exc) from exc
    return {"ok": True}
