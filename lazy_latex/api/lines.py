"""
编辑器桥接接口：插件把"刚完成的行"或"选中文本"发过来，服务端返回替换结果

端点：
- POST /lines/process     — 处理一行中的所有标记
- POST /selection/convert — 手动选区转换为单个 LaTeX 表达式

文档缓冲区由请求体重建，编辑结果以文本返回，由插件在自己的编辑事务中落盘。
"""

import structlog
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from lazy_latex.config import get_settings
from lazy_latex.editing.document import Document, Position
from lazy_latex.engine.line_processor import LineProcessor
from lazy_latex.llm.gateway import GenerationGateway
from lazy_latex.markers.scanner import scan
from lazy_latex.markers.schemas import DocumentKind
from lazy_latex.observability.metrics import REQUEST_OUTCOME_TOTAL

router = APIRouter(tags=["编辑"])
log = structlog.get_logger()

# ── 单例组件（无状态，可复用） ──
gateway = GenerationGateway()


# ── 请求/响应模型 ──

class MarkerOut(BaseModel):
    category: str
    payload: str
    start: int
    end: int


class LineProcessRequest(BaseModel):
    language_id: str = "latex"
    lines: list[str]  # 整个文档（或至少到当前行为止）
    line_number: int = Field(ge=0)  # 刚完成的行（0 起）
    project_root: str | None = None


class LineProcessResponse(BaseModel):
    changed: bool
    edited_text: str  # 替换后的行文本，可能含换行
    is_multiline: bool
    markers: list[MarkerOut] = Field(default_factory=list)
    notifications: list[str] = Field(default_factory=list)


class SelectionConvertRequest(BaseModel):
    text: str
    lines_before: list[str] = Field(default_factory=list)  # 选区之前的文档行
    language_id: str = "latex"
    project_root: str | None = None


class SelectionConvertResponse(BaseModel):
    latex: str | None
    notifications: list[str] = Field(default_factory=list)


def _document_kind(language_id: str) -> DocumentKind:
    kind = DocumentKind.from_language_id(language_id)
    if kind is None:
        raise HTTPException(status_code=400, detail=f"不支持的文档类型: {language_id}")
    return kind


@router.post("/lines/process", response_model=LineProcessResponse)
async def process_line(req: LineProcessRequest) -> LineProcessResponse:
    structlog.contextvars.bind_contextvars(
        language_id=req.language_id, line_number=req.line_number
    )
    kind = _document_kind(req.language_id)
    if req.line_number >= len(req.lines):
        raise HTTPException(status_code=400, detail="line_number 超出文档行数")
    # 每个元素必须是单行，否则重建的文档行号会错位
    if any("\n" in line or "\r" in line for line in req.lines):
        raise HTTPException(status_code=400, detail="lines 中的元素不能包含换行符")

    original = req.lines[req.line_number]
    markers = scan(original, kind)
    log.info("收到行处理请求", markers=len(markers))
    notes: list[str] = []

    result = None
    if markers:
        document = Document("\n".join(req.lines), req.language_id, req.project_root)
        processor = LineProcessor(gateway=gateway, settings=get_settings(), notify=notes.append)
        result = await processor.process_line(document, req.line_number, markers, original)

    REQUEST_OUTCOME_TOTAL.labels(
        operation="line", outcome="changed" if result is not None else "unchanged"
    ).inc()

    return LineProcessResponse(
        changed=result is not None,
        edited_text=result.edited_text if result else original,
        is_multiline=result.is_multiline if result else False,
        markers=[
            MarkerOut(category=m.category.value, payload=m.payload, start=m.start, end=m.end)
            for m in markers
        ],
        notifications=notes,
    )


@router.post("/selection/convert", response_model=SelectionConvertResponse)
async def convert_selection(req: SelectionConvertRequest) -> SelectionConvertResponse:
    structlog.contextvars.bind_contextvars(language_id=req.language_id)
    _document_kind(req.language_id)

    # 选区作为最后一行，上文即 lines_before
    document = Document(
        "\n".join([*req.lines_before, req.text]), req.language_id, req.project_root
    )
    last = document.line_count - 1
    first = last - req.text.count("\n")
    start = Position(first, 0)
    end = Position(last, len(document.line_at(last)))

    notes: list[str] = []
    processor = LineProcessor(gateway=gateway, settings=get_settings(), notify=notes.append)
    latex = await processor.convert_selection(document, start, end)
    REQUEST_OUTCOME_TOTAL.labels(
        operation="selection", outcome="changed" if latex is not None else "unchanged"
    ).inc()

    return SelectionConvertResponse(latex=latex, notifications=notes)
