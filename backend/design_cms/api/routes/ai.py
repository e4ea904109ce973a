import json
import logging
import uuid
from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse

from design_cms import crud
from design_cms.agent.artifacts import (
    ComponentDocs,
    ComponentPrompts,
    ComponentSpec,
    DocsRequest,
    ExtractedSpec,
    GeneratedCode,
    PromptsRequest,
    ThemeContext,
)
from design_cms.agent.component_agent import ComponentCodeAgent
from design_cms.agent.docs_agent import DocsAgent
from design_cms.agent.llm_client import ImageInput
from design_cms.agent.orchestrator import run_pipeline_generator
from design_cms.agent.prompts_agent import UsagePromptsAgent
from design_cms.agent.spec_extractor_agent import SpecExtractorAgent, SpecSheet
from design_cms.api.deps import GeneratorPrincipal, SessionDep
from design_cms.core.config import settings
from design_cms.models import GenerationRun, GenerationRunCreate, GenerationRunWithArtifacts

router = APIRouter()
logger = logging.getLogger(__name__)


def require_llm_configured(principal: GeneratorPrincipal) -> None:
    # Authorization runs first, so unauthenticated callers get 401 before this 500.
    if not settings.LLM_API_KEY:
        raise HTTPException(status_code=500, detail="LLM API key not configured")


LLMReady = Depends(require_llm_configured)


def _parse_theme(theme_json: str | None) -> ThemeContext | None:
    if not theme_json:
        return None
    try:
        return ThemeContext.model_validate(json.loads(theme_json))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Ignoring unparseable theme payload: %s", exc)
        return None


async def _read_spec_sheet(image: UploadFile | None, theme: str | None) -> SpecSheet:
    if image is None:
        raise HTTPException(status_code=400, detail="No image file provided")
    data = await image.read()
    if not data:
        raise HTTPException(status_code=400, detail="No image file provided")
    return SpecSheet(
        image=ImageInput(data=data, media_type=image.content_type or "image/png"),
        theme=_parse_theme(theme),
    )


def _generation_failed(exc: Exception, fallback: str) -> HTTPException:
    logger.error("AI generation error: %s", exc, exc_info=True)
    return HTTPException(status_code=500, detail=str(exc) or fallback)


@router.post("/extract-spec", response_model=ExtractedSpec, dependencies=[LLMReady])
async def extract_spec(
    principal: GeneratorPrincipal,
    image: UploadFile | None = File(default=None),
    theme: str | None = Form(default=None),
) -> Any:
    """Extract component metadata from an uploaded spec sheet image."""
    sheet = await _read_spec_sheet(image, theme)
    try:
        return await SpecExtractorAgent().run(sheet)
    except Exception as exc:
        raise _generation_failed(exc, "Failed to extract spec from image") from exc


@router.post("/generate-component", response_model=GeneratedCode, dependencies=[LLMReady])
async def generate_component(principal: GeneratorPrincipal, spec: ComponentSpec) -> Any:
    try:
        return await ComponentCodeAgent().run(spec)
    except Exception as exc:
        raise _generation_failed(exc, "Failed to generate component") from exc


@router.post("/generate-prompts", response_model=ComponentPrompts, dependencies=[LLMReady])
async def generate_prompts(principal: GeneratorPrincipal, component: PromptsRequest) -> Any:
    try:
        return await UsagePromptsAgent().run(component)
    except Exception as exc:
        raise _generation_failed(exc, "Failed to generate prompts") from exc


@router.post("/generate-docs", response_model=ComponentDocs, dependencies=[LLMReady])
async def generate_docs(principal: GeneratorPrincipal, component: DocsRequest) -> Any:
    try:
        return await DocsAgent().run(component)
    except Exception as exc:
        raise _generation_failed(exc, "Failed to generate docs") from exc


@router.post("/pipeline", dependencies=[LLMReady])
async def run_pipeline(
    session: SessionDep,
    principal: GeneratorPrincipal,
    image: UploadFile | None = File(default=None),
    theme: str | None = Form(default=None),
    save: bool = Form(default=False),
) -> EventSourceResponse:
    """Run extract -> code -> prompts -> docs (and optionally save) and stream progress via SSE."""
    sheet = await _read_spec_sheet(image, theme)
    run = crud.create_generation_run(
        session=session,
        run_in=GenerationRunCreate(
            image_filename=image.filename if image else None,
            theme_value=sheet.theme.name if sheet.theme else None,
            requested_by=principal.subject,
        ),
    )
    logger.info("Starting generation run %s for %s", run.id, principal.subject)
    return EventSourceResponse(run_pipeline_generator(session, run.id, sheet, save=save))


@router.get("/runs/{id}", response_model=GenerationRunWithArtifacts)
def read_run(id: uuid.UUID, session: SessionDep, principal: GeneratorPrincipal) -> Any:
    run = session.get(GenerationRun, id)
    if not run:
        raise HTTPException(status_code=404, detail="Generation run not found")
    if run.requested_by != principal.subject and not principal.is_admin:
        raise HTTPException(status_code=403, detail="Not enough permissions")
    return run
