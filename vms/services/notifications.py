"""User-facing notices produced by page actions."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from flask import flash

from vms.services.errors import GENERIC_ERROR_MESSAGE, BackendError


@dataclass(frozen=True)
class Notice:
    title: str
    message: str
    category: str = "success"

    @property
    def ok(self) -> bool:
        return self.category != "error"

    def to_dict(self) -> dict:
        return asdict(self)


def success(title: str, message: str) -> Notice:
    return Notice(title, message, "success")


def info(title: str, message: str) -> Notice:
    return Notice(title, message, "info")


def failure(title: str, message: str) -> Notice:
    return Notice(title, message, "error")


def failure_from(title: str, exc: BaseException | None, fallback: str = GENERIC_ERROR_MESSAGE) -> Notice:
    """Error notice carrying the backend's message when it has one."""
    if isinstance(exc, BackendError):
        return failure(title, exc.message or fallback)
    return failure(title, fallback)


def flash_notice(notice: Notice) -> None:
    """Flash ``(title, message)``; base.html renders the title as a heading."""
    flash((notice.title, notice.message), notice.category)
