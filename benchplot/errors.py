from __future__ import annotations


class BenchplotError(Exception):
    """Base class for every error raised by benchplot."""


class CannotParse(BenchplotError, ValueError):
    def __init__(self, text: str) -> None:
        super().__init__(f"cannot parse {text!r} as a data point")
        self.text = text


class MismatchedValueKinds(BenchplotError, TypeError):
    def __init__(self, operation: str, left: str, right: str) -> None:
        super().__init__(f"mismatched value kinds for {operation}: {left} and {right}")
        self.operation = operation
        self.left = left
        self.right = right


class ValueOutOfRange(BenchplotError, OverflowError):
    pass


class PlotDataError(BenchplotError, ValueError):
    pass


class AnalyticsParseError(BenchplotError):
    pass


class BenchmarkDecodeError(BenchplotError):
    pass
