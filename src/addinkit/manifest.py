"""Serialize a :class:`~addinkit.planner.ManifestPlan` into manifest XML."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from .config import AddinType, PackageIdentity
from .planner import FormKind, ManifestPlan

__all__ = [
    "MANIFEST_NAMESPACE",
    "XSI_NAMESPACE",
    "render_manifest",
    "write_manifest",
]


LOGGER = logging.getLogger(__name__)

MANIFEST_NAMESPACE = "http://schemas.microsoft.com/office/appforoffice/1.1"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"

MANIFEST_VERSION = "1.0.0.0"
PROVIDER_NAME = "Microsoft"
DEFAULT_LOCALE = "en-US"
READ_FORM_HEIGHT = "250"

_APP_TYPES = {
    AddinType.MAIL: "MailApp",
    AddinType.TASKPANE: "TaskPaneApp",
}
_PERMISSIONS = {
    AddinType.MAIL: "ReadWriteItem",
    AddinType.TASKPANE: "ReadWriteDocument",
}


def _default_value(parent: ET.Element, tag: str, value: str) -> ET.Element:
    return ET.SubElement(parent, tag, {"DefaultValue": value})


def _text(parent: ET.Element, tag: str, value: str) -> ET.Element:
    element = ET.SubElement(parent, tag)
    element.text = value
    return element


def _build_hosts(root: ET.Element, plan: ManifestPlan) -> None:
    if plan.addin_type is AddinType.MAIL:
        hosts = ET.SubElement(root, "Hosts")
        ET.SubElement(hosts, "Host", {"Name": "Mailbox"})
        requirements = ET.SubElement(root, "Requirements")
        sets = ET.SubElement(requirements, "Sets")
        ET.SubElement(sets, "Set", {"Name": "Mailbox", "MinVersion": "1.1"})
        return

    if plan.host_entries:
        hosts = ET.SubElement(root, "Hosts")
        for name in plan.host_entries:
            ET.SubElement(hosts, "Host", {"Name": name})


def _build_forms(root: ET.Element, plan: ManifestPlan) -> None:
    if not plan.form_entries:
        return

    settings = ET.SubElement(root, "FormSettings")
    for entry in plan.form_entries:
        form = ET.SubElement(settings, "Form", {"xsi:type": entry.kind.value})
        desktop = ET.SubElement(form, "DesktopSettings")
        _default_value(desktop, "SourceLocation", entry.start_page_url)
        if entry.kind is FormKind.ITEM_READ:
            _text(desktop, "RequestedHeight", READ_FORM_HEIGHT)


def _build_rules(root: ET.Element, plan: ManifestPlan) -> None:
    if not plan.rule_entries:
        return

    collection = ET.SubElement(root, "Rule", {"xsi:type": "RuleCollection", "Mode": "Or"})
    for rule in plan.rule_entries:
        ET.SubElement(
            collection,
            "Rule",
            {
                "xsi:type": "ItemIs",
                "ItemType": rule.item_type.value,
                "FormType": rule.form_type.value,
            },
        )


def render_manifest(plan: ManifestPlan) -> str:
    """Return the manifest document for ``plan`` as a string.

    Empty form and rule collections suppress their sections entirely. Mail
    add-ins always declare the ``Mailbox`` host regardless of
    :attr:`ManifestPlan.host_entries`.
    """

    root = ET.Element(
        "OfficeApp",
        {
            "xmlns": MANIFEST_NAMESPACE,
            "xmlns:xsi": XSI_NAMESPACE,
            "xsi:type": _APP_TYPES[plan.addin_type],
        },
    )
    _text(root, "Id", str(plan.id))
    _text(root, "Version", MANIFEST_VERSION)
    _text(root, "ProviderName", PROVIDER_NAME)
    _text(root, "DefaultLocale", DEFAULT_LOCALE)
    _default_value(root, "DisplayName", plan.display_name)
    _default_value(root, "Description", plan.display_name)
    _build_hosts(root, plan)
    if plan.start_page_url is not None:
        settings = ET.SubElement(root, "DefaultSettings")
        _default_value(settings, "SourceLocation", plan.start_page_url)
    _text(root, "Permissions", _PERMISSIONS[plan.addin_type])
    _build_forms(root, plan)
    _build_rules(root, plan)

    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def write_manifest(plan: ManifestPlan, identity: PackageIdentity, directory: str | Path) -> Path:
    """Write the manifest for ``plan`` into ``directory`` and return its path."""

    destination = Path(directory) / identity.manifest_file_name
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(render_manifest(plan), encoding="utf-8")
    LOGGER.info("wrote manifest %s", destination)
    return destination
