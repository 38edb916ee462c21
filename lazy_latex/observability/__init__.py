"""LLM 与编辑器交互中的可观测性：日志、指标、错误上报"""
