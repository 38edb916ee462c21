"""
Lazy LaTeX：把行内 ;;...;; 标记替换为 LLM 生成的 LaTeX / Markdown 内容
"""

__version__ = "0.1.0"
