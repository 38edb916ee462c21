import pytest

from lazy_latex.config import Settings
from lazy_latex.llm.demux import demultiplex
from lazy_latex.markers.schemas import DocumentKind


def make_settings(**overrides) -> Settings:
    """Settings isolated from any local .env file."""
    values = {"LLM_API_KEY": "test-key"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeGateway:
    """Stands in for GenerationGateway; records every call."""

    def __init__(self, batch=None, anything=None, expression=None):
        self.batch = batch if batch is not None else []
        self.anything = anything or {}
        self.expression = expression
        self.calls: list[tuple] = []

    async def convert_batch(
        self, descriptions, context="", raw_line="", kind=DocumentKind.LATEX, project_root=None
    ):
        self.calls.append(("batch", list(descriptions), context, raw_line))
        if isinstance(self.batch, Exception):
            raise self.batch
        return demultiplex("\n".join(self.batch), len(descriptions))

    async def insert_anything(
        self, instruction, context="", raw_line="", kind=DocumentKind.LATEX, project_root=None
    ):
        self.calls.append(("anything", instruction, context, raw_line))
        result = self.anything.get(instruction, "")
        if isinstance(result, Exception):
            raise result
        return result

    async def convert_expression(
        self, text, context="", kind=DocumentKind.LATEX, project_root=None
    ):
        self.calls.append(("expression", text, context))
        if isinstance(self.expression, Exception):
            raise self.expression
        return self.expression or ""


@pytest.fixture
def settings() -> Settings:
    return make_settings()
