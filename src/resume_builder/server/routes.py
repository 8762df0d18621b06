"""HTTP routes for generation, profile, archive and rendering."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel, ConfigDict

from resume_builder.exceptions import Unauthenticated
from resume_builder.export.pdf_renderer import render
from resume_builder.export.templates import TemplateId, list_templates
from resume_builder.models.profile import (
    CallerIdentity,
    DisplayNamePreference,
    Profile,
)
from resume_builder.models.resume import GenerationRequest
from resume_builder.pipeline.orchestrator import ResumeBuilder

router = APIRouter()


# --- Schemas ---
class RenderBody(BaseModel):
    resume: str = ""
    template: str = TemplateId.PROFESSIONAL.value


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: str | None = None
    full_name: str | None = None
    phone: str | None = None
    website: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    display_name_preference: DisplayNamePreference | None = None


class ResumeSummary(BaseModel):
    id: str
    job_description: str
    resume_content: str
    created_at: datetime


# --- Dependencies ---
def get_caller(authorization: str | None = Header(default=None)) -> CallerIdentity | None:
    """Identity from ``Authorization: Bearer <user id>``.

    The token is issued and verified upstream by the identity service.
    Returns None when absent so the service can refuse the call itself.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return CallerIdentity(user_id=token.strip())


def require_caller(caller: CallerIdentity | None = Depends(get_caller)) -> CallerIdentity:
    if caller is None:
        raise Unauthenticated()
    return caller


def get_builder(request: Request) -> ResumeBuilder:
    startup_error = request.app.state.startup_error
    if startup_error is not None:
        raise startup_error
    return request.app.state.builder


# --- Routes ---
@router.get("/health")
def health(request: Request):
    return {"ok": request.app.state.startup_error is None}


@router.get("/templates")
def templates():
    return [{"id": t.id.value, "label": t.label} for t in list_templates()]


@router.options("/generate-resume")
def generate_resume_options():
    # Bare OPTIONS without preflight headers; real preflights stop at the CORS middleware.
    return Response(status_code=200)


@router.post("/generate-resume")
async def generate_resume(
    body: GenerationRequest,
    caller: CallerIdentity | None = Depends(get_caller),
    builder: ResumeBuilder = Depends(get_builder),
):
    resume = await builder.generate(body.job_description, caller, body.profile)
    return {"resume": resume}


@router.post("/render", response_class=HTMLResponse)
def render_resume(body: RenderBody):
    return HTMLResponse(render(body.resume, body.template).html)


@router.get("/profile", response_model=Profile)
def get_profile(
    caller: CallerIdentity = Depends(require_caller),
    builder: ResumeBuilder = Depends(get_builder),
):
    return builder.profiles.get_or_create(caller)


@router.put("/profile", response_model=Profile)
def update_profile(
    body: ProfileUpdate,
    caller: CallerIdentity = Depends(require_caller),
    builder: ResumeBuilder = Depends(get_builder),
):
    return builder.profiles.update(caller, **body.model_dump(exclude_unset=True))


@router.get("/resumes", response_model=list[ResumeSummary])
def list_resumes(
    request: Request,
    limit: int | None = Query(default=None, ge=1, le=500),
    caller: CallerIdentity = Depends(require_caller),
    builder: ResumeBuilder = Depends(get_builder),
):
    limit = limit or request.app.state.config.storage.history_limit
    return builder.history(caller, limit=limit)


@router.post("/resumes", response_model=ResumeSummary, status_code=201)
async def create_resume(
    body: GenerationRequest,
    caller: CallerIdentity | None = Depends(get_caller),
    builder: ResumeBuilder = Depends(get_builder),
):
    result = await builder.build(body.job_description, caller, body.profile)
    return result.resume


@router.get("/resumes/{resume_id}/download")
def download_resume(
    resume_id: str,
    template: str = TemplateId.PROFESSIONAL.value,
    fmt: str = Query(default="pdf", alias="format", pattern="^(pdf|html|txt)$"),
    caller: CallerIdentity = Depends(require_caller),
    builder: ResumeBuilder = Depends(get_builder),
):
    download = builder.download(caller, resume_id, template, fmt)
    return Response(
        content=download.content,
        media_type=download.media_type,
        headers={"Content-Disposition": f'attachment; filename="{download.filename}"'},
    )
