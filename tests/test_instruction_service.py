"""Tests for loading project and user instruction sources."""
import pytest

from lazy_latex.services.instruction_service import load_instruction_sources
from tests.conftest import make_settings


@pytest.mark.asyncio
async def test_project_file_and_user_setting(tmp_path):
    (tmp_path / ".lazy-latex.md").write_text("\n  Use bold vectors.  \n", encoding="utf-8")
    settings = make_settings(PROMPT_EXTRA="  Prefer \\tfrac. ")

    sources = await load_instruction_sources(tmp_path, settings)

    assert sources.project == "Use bold vectors."
    assert sources.user == "Prefer \\tfrac."
    assert not sources.is_empty


@pytest.mark.asyncio
async def test_missing_file_is_not_an_error(tmp_path):
    sources = await load_instruction_sources(tmp_path, make_settings())
    assert sources.project == ""
    assert sources.is_empty


@pytest.mark.asyncio
async def test_no_project_root(settings):
    sources = await load_instruction_sources(None, settings)
    assert sources.project == ""


@pytest.mark.asyncio
async def test_unreadable_file_is_treated_as_absent(tmp_path):
    # a directory with the instruction file's name cannot be read as text
    (tmp_path / ".lazy-latex.md").mkdir()
    sources = await load_instruction_sources(tmp_path, make_settings(PROMPT_EXTRA="x"))

    assert sources.project == ""
    assert sources.user == "x"


@pytest.mark.asyncio
async def test_custom_file_name(tmp_path):
    (tmp_path / "rules.md").write_text("rule", encoding="utf-8")
    sources = await load_instruction_sources(
        tmp_path, make_settings(PROJECT_PROMPT_FILE="rules.md")
    )
    assert sources.project == "rule"
