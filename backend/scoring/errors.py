"""Input errors that reject a whole calculation. Messages are shown to the user as-is."""
from __future__ import annotations


class ScoreInputError(ValueError):
    """Base for every error that aborts a calculation before any result exists."""


class ParseError(ScoreInputError):
    def __init__(self, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        super().__init__(f"第 {line_number} 行 CSV 格式有误：{line}")


class UnknownRoleError(ScoreInputError):
    def __init__(self, role: str):
        self.role = role
        super().__init__(f"未知岗位名称：{role}")


class InvalidRangeError(ScoreInputError):
    def __init__(self, role: str, start: str = "", end: str = ""):
        self.role = role
        self.start = start
        self.end = end
        super().__init__(f"日期顺序错误：{role}")


class EmptyInputError(ScoreInputError):
    def __init__(self) -> None:
        super().__init__("没有可计算的任职记录")
