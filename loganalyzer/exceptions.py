"""
Error kinds raised by the parsing pipeline.
"""

from typing import Optional

__all__ = ['LogMismatchError', 'StreamError']


class LogMismatchError(ValueError):
    """A log line does not match the compiled line pattern."""

    def __init__(self, line: str, log_format: str):
        self.line = line
        self.log_format = log_format
        super().__init__(f"Log not matched\n{log_format}\n{line}")


class StreamError(RuntimeError):
    """The underlying input stream reported a failure."""

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original

    @classmethod
    def wrap(cls, error: BaseException) -> 'StreamError':
        if isinstance(error, cls):
            return error
        wrapped = cls(f"Stream failed: {error}", original=error)
        wrapped.__cause__ = error
        return wrapped
