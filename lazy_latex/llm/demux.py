"""
批量响应拆分：一次调用的多行输出 → 按位置对应回每个标记

- 按换行拆分，逐行 strip，空行直接丢弃（模型多输出的空分隔行不会错位）
- 取前 expected_count 行；不足的位置补空串，由替换引擎当作"不替换"
- 永不抛错，属于尽力而为的有损映射
"""


def demultiplex(raw_response: str | None, expected_count: int) -> list[str]:
    """返回长度恰好为 expected_count 的输出列表"""
    if expected_count <= 0:
        return []

    lines = [line.strip() for line in (raw_response or "").splitlines()]
    usable = [line for line in lines if line][:expected_count]
    return usable + [""] * (expected_count - len(usable))
