"""Scaffolding for Office client add-ins.

The package turns a handful of user choices into a ready-to-serve add-in
project: a sanitized package identity, a manifest plan describing forms,
activation rules and hosts, the manifest XML itself, and the surrounding
build and markup files.
"""

from __future__ import annotations

from .config import AddinType, OutlookForm, PackageIdentity, ProjectOptions, Technology
from .errors import MissingStartPage, ScaffoldError, UnsupportedHost, UnsupportedTechnology
from .manifest import render_manifest, write_manifest
from .naming import manifest_file_name, sanitize, slugify
from .planner import ManifestPlan, ManifestPlanner, plan
from .scaffold import AddinScaffolder, ScaffoldResult
from .template import TemplateRenderer, TemplateRenderingError

__all__ = [
    "AddinScaffolder",
    "AddinType",
    "ManifestPlan",
    "ManifestPlanner",
    "MissingStartPage",
    "OutlookForm",
    "PackageIdentity",
    "ProjectOptions",
    "ScaffoldError",
    "ScaffoldResult",
    "Technology",
    "TemplateRenderer",
    "TemplateRenderingError",
    "UnsupportedHost",
    "UnsupportedTechnology",
    "manifest_file_name",
    "plan",
    "render_manifest",
    "sanitize",
    "slugify",
    "write_manifest",
]

__version__ = "0.1.0"
