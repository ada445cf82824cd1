from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Iterator
from uuid import UUID

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from addinkit.config import AddinType, OutlookForm, ProjectOptions  # noqa: E402

PROJECT_DISPLAY_NAME = "My Office Add-in"
ALL_FORMS = tuple(form.value for form in OutlookForm)
ALL_HOSTS = ("Document", "Workbook", "Presentation", "Project")


@pytest.fixture()
def id_factory() -> Callable[[], UUID]:
    """Deterministic UUIDs, counting up from 1."""

    def numbers() -> Iterator[UUID]:
        value = 1
        while True:
            yield UUID(int=value)
            value += 1

    sequence = numbers()
    return lambda: next(sequence)


@pytest.fixture()
def mail_options() -> Callable[..., ProjectOptions]:
    def build(**overrides) -> ProjectOptions:
        values = {
            "display_name": PROJECT_DISPLAY_NAME,
            "addin_type": AddinType.MAIL,
            "technology": "html",
            "selected_forms": ALL_FORMS,
        }
        values.update(overrides)
        return ProjectOptions(**values)

    return build


@pytest.fixture()
def taskpane_options() -> Callable[..., ProjectOptions]:
    def build(**overrides) -> ProjectOptions:
        values = {
            "display_name": PROJECT_DISPLAY_NAME,
            "addin_type": AddinType.TASKPANE,
            "technology": "ng",
            "selected_hosts": ALL_HOSTS,
        }
        values.update(overrides)
        return ProjectOptions(**values)

    return build
