"""Prompt 模板与组装"""

from lazy_latex.prompts.builder import PromptPair, assemble_prompt
from lazy_latex.prompts.templates import PromptTask

__all__ = ["PromptPair", "PromptTask", "assemble_prompt"]
