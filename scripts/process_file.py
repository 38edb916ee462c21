"""
批处理脚本：按顺序处理已有 .tex / .md 文件中的每一行标记

运行方式：
    poetry run python scripts/process_file.py paper.tex [-o out.tex]

每行的上文窗口取自已处理过的内容，与编辑器中逐行回车的效果一致。
不指定 -o 时覆盖原文件。
"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

# 确保项目根目录在 sys.path 中
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from lazy_latex.config import get_settings
from lazy_latex.editing.document import Document
from lazy_latex.engine.line_processor import LineProcessor
from lazy_latex.observability.logging_config import setup_logging

log = structlog.get_logger()

_SUFFIX_LANGUAGES = {".tex": "latex", ".md": "markdown", ".markdown": "markdown"}


async def process_file(source: Path, target: Path) -> int:
    """返回发生替换的行数"""
    language_id = _SUFFIX_LANGUAGES.get(source.suffix.lower())
    if language_id is None:
        raise SystemExit(f"不支持的文件类型: {source.suffix}")

    document = Document(
        source.read_text(encoding="utf-8"),
        language_id=language_id,
        project_root=str(source.resolve().parent),
    )
    processor = LineProcessor(settings=get_settings())

    edited = 0
    line_number = 0
    while line_number < document.line_count:
        before = document.line_count
        result = await processor.process_line(document, line_number)
        if result is not None:
            edited += 1
        # 替换可能把一行展开成多行，跳过新增的行
        line_number += 1 + (document.line_count - before)

    target.write_text(document.text, encoding="utf-8")
    log.info("文件处理完成", source=str(source), target=str(target), edited_lines=edited)
    return edited


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="批量替换文件中的 Lazy LaTeX 标记")
    parser.add_argument("source", type=Path)
    parser.add_argument("-o", "--output", type=Path, default=None)
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(env=settings.ENV, level=settings.LOG_LEVEL)
    asyncio.run(process_file(args.source, args.output or args.source))
