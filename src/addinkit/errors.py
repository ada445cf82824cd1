"""Custom exception types raised while planning and scaffolding add-ins."""

from __future__ import annotations


class ScaffoldError(RuntimeError):
    """Base class for errors reported by the add-in scaffolder."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class UnsupportedTechnology(ScaffoldError):
    """Raised when a project asks for a technology no scaffold exists for."""

    def __init__(self, technology: str) -> None:
        self.technology = technology
        super().__init__(f"unsupported technology '{technology}'")


class UnsupportedHost(ScaffoldError):
    """Raised when a host application token cannot be mapped to a host name."""

    def __init__(self, host: str) -> None:
        self.host = host
        super().__init__(f"unsupported host application '{host}'")


class MissingStartPage(ScaffoldError):
    """Raised when a manifest-only project is planned without a start page."""


__all__ = [
    "MissingStartPage",
    "ScaffoldError",
    "UnsupportedHost",
    "UnsupportedTechnology",
]
