from unittest.mock import AsyncMock, patch, MagicMock

import pytest

from design_cms.agent.artifacts import (
    ComponentDocs,
    ComponentPrompts,
    ComponentSpec,
    DocsRequest,
    ExtractedSpec,
    PromptsRequest,
    ThemeContext,
)
from design_cms.agent.component_agent import ComponentCodeAgent
from design_cms.agent.docs_agent import DocsAgent
from design_cms.agent.llm_client import ImageInput
from design_cms.agent.prompts_agent import UsagePromptsAgent
from design_cms.agent.spec_extractor_agent import SpecExtractorAgent, SpecSheet


def _mock_openai(content):
    mock_message = MagicMock()
    mock_message.content = content
    mock_choice = MagicMock()
    mock_choice.message = mock_message
    mock_response = MagicMock()
    mock_response.choices = [mock_choice]

    mock_completions = MagicMock()
    mock_completions.create = AsyncMock(return_value=mock_response)

    mock_chat = MagicMock()
    mock_chat.completions = mock_completions

    mock_client_instance = AsyncMock()
    mock_client_instance.chat = mock_chat
    return mock_client_instance, mock_completions


@pytest.mark.asyncio
async def test_spec_extractor_agent():
    client_instance, completions = _mock_openai("""
    {
      "name": "Badge",
      "description": "Small status label",
      "category": "Feedback",
      "variants": {"variant": ["default", "destructive"]},
      "colorMapping": {"Red": "destructive"}
    }
    """)
    theme = ThemeContext(name="Light", colors={"primary": "#2563eb", "destructive": "#dc2626"})

    with patch("design_cms.agent.llm_client.AsyncOpenAI", return_value=client_instance):
        with patch("design_cms.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            agent = SpecExtractorAgent(model_name="vision-model")
            spec = await agent.run(SpecSheet(image=ImageInput(data=b"img"), theme=theme))

    assert isinstance(spec, ExtractedSpec)
    assert spec.name == "Badge"
    assert spec.category == "feedback"
    assert spec.color_mapping == {"Red": "destructive"}
    kwargs = completions.create.await_args.kwargs
    assert kwargs["model"] == "vision-model"
    assert "destructive: #dc2626" in kwargs["messages"][1]["content"][1]["text"]


@pytest.mark.asyncio
async def test_spec_extractor_coerces_unknown_category():
    client_instance, _ = _mock_openai('{"name": "Widget", "category": "gizmos"}')

    with patch("design_cms.agent.llm_client.AsyncOpenAI", return_value=client_instance):
        with patch("design_cms.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            spec = await SpecExtractorAgent(model_name="vision-model").run(
                SpecSheet(image=ImageInput(data=b"img"))
            )

    assert spec.category == "other"


@pytest.mark.asyncio
async def test_spec_extractor_rejects_blank_name():
    client_instance, _ = _mock_openai('{"name": "  "}')

    with patch("design_cms.agent.llm_client.AsyncOpenAI", return_value=client_instance):
        with patch("design_cms.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            with pytest.raises(ValueError):
                await SpecExtractorAgent(model_name="vision-model").run(
                    SpecSheet(image=ImageInput(data=b"img"))
                )


@pytest.mark.asyncio
async def test_component_code_agent():
    client_instance, completions = _mock_openai(
        "```tsx\nexport function Badge() { return <span /> }\n```"
    )
    spec = ComponentSpec(
        name="Badge",
        description="Status label",
        variants={"Type": ["Default", "Destructive"]},
        colorMapping={"Red": "destructive"},
    )

    with patch("design_cms.agent.llm_client.AsyncOpenAI", return_value=client_instance):
        with patch("design_cms.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            code = await ComponentCodeAgent(model_name="test-model").run(spec)

    assert code.code == "export function Badge() { return <span /> }"
    kwargs = completions.create.await_args.kwargs
    assert kwargs["temperature"] == 0.7
    assert '"variant": "default"' in kwargs["messages"][1]["content"]


@pytest.mark.asyncio
async def test_usage_prompts_agent():
    client_instance, _ = _mock_openai("""
    {
      "basic": ["Add a badge"],
      "advanced": ["Add a destructive badge with an icon"],
      "useCases": [{"scenario": "Status", "prompt": "Show order status", "output": "<Badge>Paid</Badge>"}]
    }
    """)

    with patch("design_cms.agent.llm_client.AsyncOpenAI", return_value=client_instance):
        with patch("design_cms.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            prompts = await UsagePromptsAgent(model_name="test-model").run(
                PromptsRequest(name="Badge", variants={"variant": ["default"]})
            )

    assert isinstance(prompts, ComponentPrompts)
    assert prompts.basic == ["Add a badge"]
    assert prompts.use_cases[0].scenario == "Status"
    assert prompts.model_dump(by_alias=True)["useCases"][0]["output"] == "<Badge>Paid</Badge>"


@pytest.mark.asyncio
async def test_docs_agent():
    client_instance, _ = _mock_openai("""
    {
      "api": {"props": [{"name": "variant", "type": "string", "required": false, "default": "default", "description": "Style"},
                        {"name": "count", "type": "number", "default": 0}]},
      "installation": {"dependencies": ["clsx"], "setupSteps": ["Copy badge.tsx"]},
      "examples": [{"name": "Basic", "code": "<Badge />"}]
    }
    """)

    with patch("design_cms.agent.llm_client.AsyncOpenAI", return_value=client_instance):
        with patch("design_cms.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            docs = await DocsAgent(model_name="test-model").run(
                DocsRequest(name="Badge", code="export function Badge() {}")
            )

    assert isinstance(docs, ComponentDocs)
    assert docs.api.props[1].default == "0"
    assert docs.installation.setup_steps == ["Copy badge.tsx"]
    assert docs.examples[0].code == "<Badge />"


@pytest.mark.asyncio
async def test_docs_agent_requires_code():
    with patch("design_cms.agent.llm_client.AsyncOpenAI"):
        with patch("design_cms.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            agent = DocsAgent(model_name="test-model")
            with pytest.raises(ValueError):
                await agent.run(DocsRequest(name="Badge", code="   "))
