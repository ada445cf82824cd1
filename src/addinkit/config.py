"""Option records shared by the planner, the scaffolder and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .naming import manifest_file_name, sanitize

__all__ = [
    "AddinType",
    "OutlookForm",
    "PackageIdentity",
    "PROJECT_VERSION",
    "ProjectOptions",
    "Technology",
]


PROJECT_VERSION = "0.1.0"


class AddinType(str, Enum):
    """Scaffolds the generator knows how to build."""

    MAIL = "mail"
    TASKPANE = "taskpane"


class Technology(str, Enum):
    """Client stacks a scaffold can be generated for."""

    HTML = "html"
    ANGULAR = "ng"
    MANIFEST_ONLY = "manifest-only"


class OutlookForm(str, Enum):
    """Outlook item forms a mail add-in can activate on."""

    MAIL_READ = "mail-read"
    MAIL_COMPOSE = "mail-compose"
    APPOINTMENT_READ = "appointment-read"
    APPOINTMENT_COMPOSE = "appointment-compose"


class ProjectOptions(BaseModel):
    """Everything the user chose for a single generation run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    display_name: str = Field(..., description="Free-text project name shown to users.")
    addin_type: AddinType = Field(..., description="Which scaffold to generate.")
    technology: str = Field(default=Technology.HTML.value, description="Client stack of the generated add-in.")
    selected_forms: Tuple[OutlookForm, ...] = Field(
        default=(), description="Outlook forms the mail add-in activates on."
    )
    selected_hosts: Tuple[str, ...] = Field(
        default=(), description="Host applications the task-pane add-in supports."
    )
    start_page_override: str | None = Field(
        None, description="Start page used when the technology ships no page of its own."
    )

    @field_validator("display_name")
    @classmethod
    def _require_display_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("project name must not be empty")
        return value

    @field_validator("technology")
    @classmethod
    def _normalize_technology(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("selected_forms")
    @classmethod
    def _dedupe_forms(cls, value: Tuple[OutlookForm, ...]) -> Tuple[OutlookForm, ...]:
        return tuple(dict.fromkeys(value))

    @field_validator("start_page_override")
    @classmethod
    def _blank_start_page_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


@dataclass(frozen=True, slots=True)
class PackageIdentity:
    """Identifiers derived from the display name once per run.

    Attributes
    ----------
    display_name:
        The name as the user typed it. Only used for display.
    slug:
        The sanitized package identifier, see :func:`addinkit.naming.sanitize`.
    manifest_file_name:
        ``manifest-<slug>.xml``.
    version:
        Version written into the generated package manifests.
    """

    display_name: str
    slug: str
    manifest_file_name: str
    version: str = PROJECT_VERSION

    @classmethod
    def from_options(cls, options: ProjectOptions) -> "PackageIdentity":
        slug = sanitize(options.display_name)
        return cls(
            display_name=options.display_name,
            slug=slug,
            manifest_file_name=manifest_file_name(slug),
        )

    def context(self) -> Mapping[str, str]:
        """Return a dictionary compatible with the templating helpers."""

        return {
            "name": self.display_name,
            "slug": self.slug,
            "manifest_file_name": self.manifest_file_name,
            "version": self.version,
        }
