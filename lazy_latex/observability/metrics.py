"""
Prometheus 指标定义

所有指标统一在此文件定义，编辑请求中间件、桥接端点和行处理流程按需引用。
"""

from prometheus_client import Counter, Histogram

# ── 桥接请求指标 ──

REQUEST_TOTAL = Counter(
    "lazy_latex_request_total",
    "编辑请求总数",
    ["operation", "status_code"],  # operation: line/selection
)

REQUEST_DURATION = Histogram(
    "lazy_latex_request_duration_ms",
    "编辑请求耗时（毫秒）",
    ["operation"],
    buckets=[50, 100, 200, 500, 1000, 2000, 5000, 10000],
)

REQUEST_OUTCOME_TOTAL = Counter(
    "lazy_latex_request_outcome_total",
    "编辑请求结果",
    ["operation", "outcome"],  # outcome: changed/unchanged
)

# ── 标记识别指标 ──

MARKER_TOTAL = Counter(
    "lazy_latex_marker_total",
    "识别到的标记总数",
    ["category"],  # inline/display/anything
)

LINE_EDIT_TOTAL = Counter(
    "lazy_latex_line_edit_total",
    "已提交的整行原子编辑次数",
)

# ── LLM 调用指标 ──

LLM_CALL_TOTAL = Counter(
    "lazy_latex_llm_call_total",
    "LLM 调用总数",
    ["task", "status"],  # task: expression/batch/anything；status: success/error
)

LLM_CALL_DURATION = Histogram(
    "lazy_latex_llm_call_duration_ms",
    "LLM 调用耗时（毫秒）",
    ["provider"],
    buckets=[200, 500, 1000, 2000, 5000, 10000, 30000],
)

# ── 错误指标 ──

ERROR_TOTAL = Counter(
    "lazy_latex_error_total",
    "错误总数",
    ["error_type"],  # configuration/auth/not_found/rate_limit/server/generic
)
