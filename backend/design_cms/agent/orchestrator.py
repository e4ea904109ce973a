import json
import logging
import uuid
from collections.abc import AsyncIterator

from sqlmodel import Session

from design_cms import crud
from design_cms.agent.artifacts import (
    ComponentDocs,
    ComponentPrompts,
    ComponentSpec,
    DocsRequest,
    ExtractedSpec,
    GeneratedCode,
    PromptsRequest,
)
from design_cms.agent.component_agent import ComponentCodeAgent
from design_cms.agent.docs_agent import DocsAgent
from design_cms.agent.prompts_agent import UsagePromptsAgent
from design_cms.agent.spec_extractor_agent import SpecExtractorAgent, SpecSheet
from design_cms.models import ArtifactRecordCreate, ComponentCreate

logger = logging.getLogger(__name__)

# Each stage consumes the previous stage's output, so they run strictly in order.
STAGES = ("extract", "code", "prompts", "docs")


def _rollback_session_safely(session: Session) -> None:
    try:
        session.rollback()
    except Exception as exc:
        logger.warning("Session rollback failed: %s", exc)


def _update_run_status_safely(session: Session, run_id: uuid.UUID, status: str, **fields) -> None:
    try:
        crud.update_generation_run_status(session=session, run_id=run_id, status=status, **fields)
    except Exception as exc:
        logger.warning("Failed to update generation run %s to %s: %s", run_id, status, exc)


def _store_stage(session: Session, run_id: uuid.UUID, stage: str, content: dict) -> None:
    crud.create_artifact_record(
        session=session,
        artifact_in=ArtifactRecordCreate(run_id=run_id, stage=stage, content=content),
    )


def assemble_component(
    spec: ExtractedSpec,
    code: GeneratedCode,
    prompts: ComponentPrompts,
    docs: ComponentDocs,
) -> ComponentCreate:
    """Combine the stage outputs into a component record ready to be saved."""
    return ComponentCreate(
        name=spec.name,
        description=spec.description,
        category=spec.category,
        code=code.code,
        props=[prop.model_dump() for prop in docs.api.props],
        variants=spec.variants,
        prompts=prompts.model_dump(by_alias=True),
        examples=[example.model_dump() for example in docs.examples],
        installation=docs.installation.model_dump(by_alias=True),
    )


async def run_pipeline_generator(
    session: Session,
    run_id: uuid.UUID,
    sheet: SpecSheet,
    *,
    save: bool = False,
) -> AsyncIterator[str]:
    """
    Run extract -> code -> prompts -> docs, storing every finished stage as an
    artifact of `run_id` and yielding JSON progress events for SSE.

    A failing stage ends the run with an `error` event naming the stage; the
    artifacts of the stages before it stay stored.
    """
    yield json.dumps({"status": "starting", "run_id": str(run_id), "message": "Initializing pipeline..."})
    _update_run_status_safely(session=session, run_id=run_id, status="running")

    stage = STAGES[0]
    try:
        yield json.dumps({"status": "extract", "message": "Reading spec sheet..."})
        spec = await SpecExtractorAgent().run(sheet)
        _store_stage(session, run_id, "extract", spec.model_dump(by_alias=True))
        yield json.dumps({"status": "extract_done", "artifact": spec.model_dump(by_alias=True)})

        stage = "code"
        yield json.dumps({"status": "code", "message": "Generating component code..."})
        code = await ComponentCodeAgent().run(
            ComponentSpec(
                name=spec.name,
                description=spec.description,
                variants=spec.variants,
                theme=sheet.theme,
                color_mapping=spec.color_mapping or None,
            )
        )
        _store_stage(session, run_id, "code", code.model_dump())
        yield json.dumps({"status": "code_done", "artifact": code.model_dump()})

        stage = "prompts"
        yield json.dumps({"status": "prompts", "message": "Writing usage prompts..."})
        prompts = await UsagePromptsAgent().run(
            PromptsRequest(name=spec.name, description=spec.description, variants=spec.variants)
        )
        _store_stage(session, run_id, "prompts", prompts.model_dump(by_alias=True))
        yield json.dumps({"status": "prompts_done", "artifact": prompts.model_dump(by_alias=True)})

        stage = "docs"
        yield json.dumps({"status": "docs", "message": "Documenting props and installation..."})
        docs = await DocsAgent().run(
            DocsRequest(name=spec.name, code=code.code, variants=spec.variants)
        )
        _store_stage(session, run_id, "docs", docs.model_dump(by_alias=True))
        yield json.dumps({"status": "docs_done", "artifact": docs.model_dump(by_alias=True)})

        stage = "assemble"
        component_in = assemble_component(spec, code, prompts, docs)
        component_id = None
        if save:
            stage = "save"
            component = crud.create_component(session=session, component_in=component_in)
            component_id = component.id
            logger.info("Generation run %s saved component %s", run_id, component.slug)

        _update_run_status_safely(
            session=session, run_id=run_id, status="completed", component_id=component_id
        )
        yield json.dumps({
            "status": "completed",
            "message": "Component saved." if component_id else "Component generated.",
            "component_id": str(component_id) if component_id else None,
            "artifact": component_in.model_dump(mode="json"),
        })

    except Exception as e:
        logger.error("Generation run %s failed at stage %s: %s", run_id, stage, e, exc_info=True)
        _rollback_session_safely(session)
        yield json.dumps({"status": "error", "stage": stage, "message": str(e)})
        _update_run_status_safely(session=session, run_id=run_id, status="failed", error=f"{stage}: {e}")
