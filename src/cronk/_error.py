from __future__ import annotations

from typing import Literal

CronkErrorKind = Literal["field", "search"]


class CronkError(Exception):
    kind: CronkErrorKind

    def __init__(self, kind: CronkErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    @classmethod
    def field(cls, message: str) -> CronkError:
        return cls("field", message)

    @classmethod
    def search(cls, message: str) -> CronkError:
        return cls("search", message)
