"""Decide which manifest fragments a project needs.

The planner is a pure function of :class:`~addinkit.config.ProjectOptions`.
It never touches the filesystem; the only non-deterministic input is the
add-in id, which comes from an injectable factory so tests can pin it.
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Callable, Dict, Iterable, Mapping, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .config import AddinType, OutlookForm, ProjectOptions, Technology
from .errors import MissingStartPage, UnsupportedHost, UnsupportedTechnology

__all__ = [
    "BASE_URL",
    "FormEntry",
    "FormKind",
    "FormType",
    "HOST_NAMES",
    "ItemType",
    "ManifestPlan",
    "ManifestPlanner",
    "RuleEntry",
    "plan",
    "resolve_technology",
]


LOGGER = logging.getLogger(__name__)

BASE_URL = "https://localhost:8443"


class FormKind(str, Enum):
    """Item display modes an Outlook form can be declared for."""

    ITEM_READ = "ItemRead"
    ITEM_EDIT = "ItemEdit"


class ItemType(str, Enum):
    MESSAGE = "Message"
    APPOINTMENT = "Appointment"


class FormType(str, Enum):
    READ = "Read"
    EDIT = "Edit"


class FormEntry(BaseModel):
    """A ``<Form>`` fragment of the manifest."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: FormKind = Field(..., description="Display mode the form activates in.")
    start_page_url: str = Field(..., description="Page loaded by the form.")


class RuleEntry(BaseModel):
    """An ``<Rule xsi:type="ItemIs">`` activation rule."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    item_type: ItemType
    form_type: FormType


class ManifestPlan(BaseModel):
    """Structured description of the manifest a project needs."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: UUID = Field(..., description="Identifier of the add-in, fresh for every generation.")
    addin_type: AddinType
    technology: Technology
    display_name: str = Field(..., description="Display name, copied verbatim from the options.")
    form_entries: Tuple[FormEntry, ...] = ()
    rule_entries: Tuple[RuleEntry, ...] = ()
    host_entries: Tuple[str, ...] = ()
    start_page_url: str | None = Field(None, description="Task-pane start page. Unused for mail add-ins.")

    def form_kinds(self) -> Tuple[FormKind, ...]:
        return tuple(entry.kind for entry in self.form_entries)


# Each Outlook form implies exactly one form kind and one activation rule.
# Iteration order of this table is the order entries appear in the manifest.
_FORM_CAPABILITIES: Dict[OutlookForm, Tuple[FormKind, RuleEntry]] = {
    OutlookForm.MAIL_READ: (
        FormKind.ITEM_READ,
        RuleEntry(item_type=ItemType.MESSAGE, form_type=FormType.READ),
    ),
    OutlookForm.MAIL_COMPOSE: (
        FormKind.ITEM_EDIT,
        RuleEntry(item_type=ItemType.MESSAGE, form_type=FormType.EDIT),
    ),
    OutlookForm.APPOINTMENT_READ: (
        FormKind.ITEM_READ,
        RuleEntry(item_type=ItemType.APPOINTMENT, form_type=FormType.READ),
    ),
    OutlookForm.APPOINTMENT_COMPOSE: (
        FormKind.ITEM_EDIT,
        RuleEntry(item_type=ItemType.APPOINTMENT, form_type=FormType.EDIT),
    ),
}

HOST_NAMES: Mapping[str, str] = {
    "document": "Document",
    "word": "Document",
    "workbook": "Workbook",
    "excel": "Workbook",
    "presentation": "Presentation",
    "powerpoint": "Presentation",
    "project": "Project",
}

_MAIL_START_PAGES: Mapping[Technology, Mapping[FormKind, str]] = {
    Technology.HTML: {
        FormKind.ITEM_READ: f"{BASE_URL}/appread/home/home.html",
        FormKind.ITEM_EDIT: f"{BASE_URL}/appcompose/home/home.html",
    },
    Technology.ANGULAR: {
        FormKind.ITEM_READ: f"{BASE_URL}/appread/index.html",
        FormKind.ITEM_EDIT: f"{BASE_URL}/appcompose/index.html",
    },
}

_TASKPANE_START_PAGES: Mapping[Technology, str] = {
    Technology.HTML: f"{BASE_URL}/app/home/home.html",
    Technology.ANGULAR: f"{BASE_URL}/index.html",
}


def resolve_technology(value: str | Technology) -> Technology:
    """Return the :class:`Technology` named by ``value``.

    Raises :class:`~addinkit.errors.UnsupportedTechnology` for unknown names.
    """

    if isinstance(value, Technology):
        return value
    try:
        return Technology(value)
    except ValueError as exc:
        raise UnsupportedTechnology(str(value)) from exc


def _resolve_hosts(tokens: Iterable[str]) -> Tuple[str, ...]:
    hosts: Dict[str, None] = {}
    for token in tokens:
        try:
            hosts[HOST_NAMES[token.strip().lower()]] = None
        except KeyError as exc:
            raise UnsupportedHost(token) from exc
    return tuple(hosts)


class ManifestPlanner:
    """Build :class:`ManifestPlan` objects from project options."""

    def __init__(self, id_factory: Callable[[], UUID] | None = None) -> None:
        self._id_factory = id_factory or uuid.uuid4

    def plan(self, options: ProjectOptions) -> ManifestPlan:
        technology = resolve_technology(options.technology)
        plan_id = self._id_factory()
        if options.addin_type is AddinType.MAIL:
            forms, rules = self._plan_forms(options, technology)
            LOGGER.debug(
                "planned mail add-in %s: forms=%s rules=%d",
                plan_id,
                [form.kind.value for form in forms],
                len(rules),
            )
            return ManifestPlan(
                id=plan_id,
                addin_type=options.addin_type,
                technology=technology,
                display_name=options.display_name,
                form_entries=forms,
                rule_entries=rules,
            )

        hosts = _resolve_hosts(options.selected_hosts)
        start_page = self._taskpane_start_page(options, technology)
        LOGGER.debug("planned task-pane add-in %s: hosts=%s start=%s", plan_id, list(hosts), start_page)
        return ManifestPlan(
            id=plan_id,
            addin_type=options.addin_type,
            technology=technology,
            display_name=options.display_name,
            host_entries=hosts,
            start_page_url=start_page,
        )

    def _plan_forms(
        self, options: ProjectOptions, technology: Technology
    ) -> Tuple[Tuple[FormEntry, ...], Tuple[RuleEntry, ...]]:
        selected = set(options.selected_forms)
        kinds: Dict[FormKind, None] = {}
        rules = []
        for form, (kind, rule) in _FORM_CAPABILITIES.items():
            if form not in selected:
                continue
            kinds[kind] = None
            rules.append(rule)

        forms = tuple(
            FormEntry(kind=kind, start_page_url=self._mail_start_page(options, technology, kind))
            for kind in kinds
        )
        return forms, tuple(rules)

    @staticmethod
    def _mail_start_page(options: ProjectOptions, technology: Technology, kind: FormKind) -> str:
        if technology is Technology.MANIFEST_ONLY:
            return _require_start_page(options)
        return _MAIL_START_PAGES[technology][kind]

    @staticmethod
    def _taskpane_start_page(options: ProjectOptions, technology: Technology) -> str:
        if technology is Technology.MANIFEST_ONLY:
            return _require_start_page(options)
        return _TASKPANE_START_PAGES[technology]


def _require_start_page(options: ProjectOptions) -> str:
    if options.start_page_override is None:
        raise MissingStartPage("manifest-only projects need a start page URL")
    return options.start_page_override


def plan(options: ProjectOptions, *, id_factory: Callable[[], UUID] | None = None) -> ManifestPlan:
    """Plan the manifest for ``options`` using a throwaway :class:`ManifestPlanner`."""

    return ManifestPlanner(id_factory).plan(options)
