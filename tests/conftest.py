"""
Pytest configuration and fixtures.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def settings():
    """Provide test settings (no pauses, headless)."""
    from web_commander.config import Settings, BrowserSettings

    return Settings(
        browser=BrowserSettings(
            headless=True,
            click_pause_ms=0,
            search_pause_ms=0,
        ),
    )


@pytest.fixture
def mock_page():
    """Provide a mocked IPage showing a tiny document."""
    page = MagicMock()
    page.url = "https://example.com/"
    page.title = AsyncMock(return_value="Example")
    page.content = AsyncMock(return_value="<html><body><p>Hello</p></body></html>")
    page.goto = AsyncMock()
    page.query_selector = AsyncMock(return_value=None)
    page.wait_for_load_state = AsyncMock()
    page.wait_for_content = AsyncMock()
    page.wait_for_timeout = AsyncMock()
    page.keyboard = MagicMock()
    page.keyboard.type_text = AsyncMock()
    page.keyboard.press = AsyncMock()
    return page


@pytest.fixture
def mock_element():
    """Provide a mocked IElement."""
    element = MagicMock()
    element.query_selector = AsyncMock(return_value=None)
    element.click = AsyncMock()
    element.scroll_into_view = AsyncMock()
    element.set_value = AsyncMock()
    element.type_text = AsyncMock()
    element.press = AsyncMock()
    element.get_attribute = AsyncMock(return_value=None)
    element.inner_text = AsyncMock(return_value="")
    return element


@pytest.fixture
def mock_prompts():
    """Provide a mocked PromptService with the bundled templates."""
    from web_commander.prompts.template import TemplateStore

    prompts = MagicMock()
    prompts.templates = TemplateStore()
    prompts.prompt_overhead = MagicMock(return_value=500)
    prompts.complete = AsyncMock(return_value="")
    prompts.determine_best_link = AsyncMock(return_value=None)
    return prompts


@pytest.fixture
def mock_llm():
    """Provide a mocked completion provider answering 'ok'."""
    from web_commander.interfaces.llm import LLMResponse, Usage

    llm = MagicMock()
    llm.name = "mock"
    llm.default_model = "mock-model"
    llm.complete = AsyncMock(return_value=LLMResponse(
        content="ok",
        model="mock-model",
        usage=Usage(prompt_tokens=10, completion_tokens=2, total_tokens=12),
    ))
    llm.close = AsyncMock()
    return llm
