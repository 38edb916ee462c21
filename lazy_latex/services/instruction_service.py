"""
额外指令来源：项目级文件 + 用户级配置

- 项目级：<项目根目录>/.lazy-latex.md（高优先级）。文件不存在不算错误；
  其他读取失败记录日志后视为不存在。
- 用户级：Settings.PROMPT_EXTRA（低优先级）。

每次生成调用都重新读取，用户改完文件立即生效。
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path

import structlog

from lazy_latex.config import Settings

log = structlog.get_logger()


@dataclass(frozen=True)
class InstructionSources:
    """两个来源的额外指令（均已 strip，缺失为空串）"""

    project: str = ""  # 高优先级
    user: str = ""  # 低优先级

    @property
    def is_empty(self) -> bool:
        return not self.project and not self.user


def _read_project_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return ""
    except (OSError, UnicodeDecodeError) as e:
        log.warning("项目指令文件读取失败，按不存在处理", path=str(path), error=str(e))
        return ""


async def load_instruction_sources(
    project_root: str | Path | None,
    settings: Settings,
) -> InstructionSources:
    """读取项目级 + 用户级额外指令"""
    user_extra = (settings.PROMPT_EXTRA or "").strip()

    project_extra = ""
    if project_root:
        path = Path(project_root) / settings.PROJECT_PROMPT_FILE
        project_extra = await asyncio.to_thread(_read_project_file, path)
        if project_extra:
            log.debug("已加载项目指令文件", path=str(path), chars=len(project_extra))

    return InstructionSources(project=project_extra, user=user_extra)
