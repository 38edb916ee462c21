"""
控制台交互脚本：逐行输入文档内容，回车即触发标记替换

运行方式：
    poetry run python scripts/console.py [--markdown] [--project-root PATH]

支持命令：
    /show          — 显示当前文档
    /save <path>   — 保存当前文档
    /quit          — 退出

示例输入：
    The pdf is ;;normal(0, 1);;.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from prompt_toolkit import PromptSession

# 确保项目根目录在 sys.path 中
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from lazy_latex.config import get_settings
from lazy_latex.editing.document import Document
from lazy_latex.engine.line_processor import LineProcessor
from lazy_latex.observability.logging_config import setup_logging


def _print_notice(message: str) -> None:
    print(f"\033[93m  ⚠ {message}\033[0m")


def _show(document: Document) -> None:
    print("\033[90m" + "-" * 60 + "\033[0m")
    for idx, line in enumerate(document.lines):
        print(f"\033[90m{idx:4d}\033[0m  {line}")
    print("\033[90m" + "-" * 60 + "\033[0m")


async def main(language_id: str, project_root: str | None) -> None:
    """交互式编辑主循环"""
    settings = get_settings()
    setup_logging(env=settings.ENV, level=settings.LOG_LEVEL)

    document = Document(language_id=language_id, project_root=project_root)
    processor = LineProcessor(settings=settings, notify=_print_notice)
    processor.attach(document)
    pt_session = PromptSession()

    print("=" * 60)
    print(f"  Lazy LaTeX 控制台（{language_id}）")
    print("  ;;行内;;  ;;;公式块;;;  ;;;;任意内容;;;;")
    print("  命令: /show | /save <path> | /quit")
    print("=" * 60)

    while True:
        try:
            user_input = await pt_session.prompt_async("> ")
        except (EOFError, KeyboardInterrupt):
            break

        command = user_input.strip()
        if command == "/quit":
            break
        if command == "/show":
            _show(document)
            continue
        if command.startswith("/save"):
            target = command[len("/save"):].strip()
            if not target:
                _print_notice("用法: /save <path>")
                continue
            Path(target).write_text(document.text, encoding="utf-8")
            print(f"\033[90m  已保存: {target}\033[0m")
            continue

        document.type_line(user_input)
        await processor.drain()
        _show(document)

    await processor.drain()
    print("再见！")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Lazy LaTeX 交互控制台")
    parser.add_argument("--markdown", action="store_true", help="按 Markdown 文档处理")
    parser.add_argument("--project-root", default=None, help="项目根目录（读取 .lazy-latex.md）")
    args = parser.parse_args()
    asyncio.run(main("markdown" if args.markdown else "latex", args.project_root))
