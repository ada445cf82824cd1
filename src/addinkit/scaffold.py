"""Write the file tree of a new Office add-in project."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .config import AddinType, PackageIdentity, ProjectOptions, Technology
from .manifest import render_manifest
from .planner import FormKind, ManifestPlan, ManifestPlanner
from .template import TemplateRenderer

__all__ = [
    "AddinScaffolder",
    "ScaffoldResult",
    "TEMPLATE_ROOT",
    "bower_json",
    "package_json",
    "tsd_json",
]


LOGGER = logging.getLogger(__name__)

TEMPLATE_ROOT = Path(__file__).resolve().parent / "templates"

DEV_DEPENDENCIES = {
    "chalk": "^1.1.1",
    "gulp": "^3.9.0",
    "gulp-load-plugins": "^1.0.0",
    "gulp-task-listing": "^1.0.1",
    "gulp-webserver": "^0.9.1",
    "minimist": "^1.2.0",
    "xmllint": "git+https://github.com/kripken/xml.js.git",
}

_BOWER_DEPENDENCIES = {
    Technology.HTML: {
        "microsoft.office.js": "*",
        "jquery": "~1.9.1",
        "office-ui-fabric": "*",
    },
    Technology.ANGULAR: {
        "microsoft.office.js": "*",
        "angular": "~1.4.4",
        "angular-route": "~1.4.4",
        "angular-sanitize": "~1.4.4",
        "office-ui-fabric": "*",
    },
}

_TYPINGS = {
    Technology.HTML: ("jquery/jquery.d.ts", "office-js/office-js.d.ts"),
    Technology.ANGULAR: (
        "angularjs/angular.d.ts",
        "angularjs/angular-route.d.ts",
        "angularjs/angular-sanitize.d.ts",
        "office-js/office-js.d.ts",
    ),
}

# Outlook forms live in their own subdirectory so read and compose pages can
# be served side by side.
_FORM_LAYOUT = {
    FormKind.ITEM_READ: ("appread", "Read", "ItemRead"),
    FormKind.ITEM_EDIT: ("appcompose", "Compose", "ItemCompose"),
}


def package_json(identity: PackageIdentity, technology: Technology) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": identity.slug,
        "version": identity.version,
        "private": True,
    }
    if technology is not Technology.MANIFEST_ONLY:
        data["scripts"] = {"postinstall": "bower install"}
    data["devDependencies"] = dict(DEV_DEPENDENCIES)
    return data


def bower_json(identity: PackageIdentity, technology: Technology) -> dict[str, Any]:
    return {
        "name": identity.slug,
        "version": identity.version,
        "dependencies": dict(_BOWER_DEPENDENCIES[technology]),
    }


def tsd_json(technology: Technology) -> dict[str, Any]:
    return {
        "version": "v4",
        "repo": "borisyankov/DefinitelyTyped",
        "ref": "master",
        "path": "typings",
        "bundle": "typings/tsd.d.ts",
        "installed": {typing: {"commit": "master"} for typing in _TYPINGS[technology]},
    }


def _dump_json(data: Mapping[str, Any]) -> str:
    return json.dumps(data, indent=2) + "\n"


@dataclass(frozen=True, slots=True)
class ScaffoldResult:
    """Outcome of :meth:`AddinScaffolder.create`."""

    path: Path
    identity: PackageIdentity
    plan: ManifestPlan
    files: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class _TreeJob:
    template_dir: Path
    prefix: str
    context: Mapping[str, Any]


@dataclass(slots=True)
class AddinScaffolder:
    """Create the project structure for a mail or task-pane add-in."""

    renderer: TemplateRenderer
    planner: ManifestPlanner
    template_root: Path

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        planner: ManifestPlanner | None = None,
        template_root: str | Path | None = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.planner = planner or ManifestPlanner()
        self.template_root = Path(template_root) if template_root else TEMPLATE_ROOT

    def create(
        self,
        options: ProjectOptions,
        target_dir: str | Path,
        *,
        force: bool = False,
    ) -> ScaffoldResult:
        """Generate the project described by ``options`` inside ``target_dir``.

        Every destination is checked before the first file is written, so a
        collision without ``force`` leaves ``target_dir`` untouched.
        """

        identity = PackageIdentity.from_options(options)
        plan = self.planner.plan(options)

        target_path = Path(target_dir).expanduser().resolve()
        context = dict(identity.context())

        generated = self._generated_files(identity, plan)
        jobs = self._tree_jobs(plan, context)
        destinations = list(generated)
        for job in jobs:
            destinations.extend(
                _join(job.prefix, relative) for relative in self.renderer.list_templates(job.template_dir)
            )

        if not force:
            for relative_path in destinations:
                destination = target_path / relative_path
                if destination.exists():
                    raise FileExistsError(f"{destination} already exists")

        target_path.mkdir(parents=True, exist_ok=True)
        for relative_path, content in generated.items():
            destination = target_path / relative_path
            destination.write_text(content, encoding="utf-8")
            LOGGER.debug("wrote %s", destination)

        for job in jobs:
            self.renderer.render_directory(job.template_dir, target_path / job.prefix, job.context)
            LOGGER.debug("rendered %s into %s", job.template_dir, target_path / job.prefix)

        LOGGER.info(
            "created %s add-in '%s' (%s) with %d files at %s",
            plan.addin_type.value,
            identity.slug,
            plan.technology.value,
            len(destinations),
            target_path,
        )
        return ScaffoldResult(
            path=target_path,
            identity=identity,
            plan=plan,
            files=tuple(sorted(destinations)),
        )

    def _generated_files(self, identity: PackageIdentity, plan: ManifestPlan) -> dict[str, str]:
        files = {
            "package.json": _dump_json(package_json(identity, plan.technology)),
            identity.manifest_file_name: render_manifest(plan),
        }
        if plan.technology is not Technology.MANIFEST_ONLY:
            files["bower.json"] = _dump_json(bower_json(identity, plan.technology))
            files["tsd.json"] = _dump_json(tsd_json(plan.technology))
        return files

    def _tree_jobs(self, plan: ManifestPlan, context: Mapping[str, Any]) -> list[_TreeJob]:
        root = self.template_root
        jobs = [_TreeJob(root / "common", "", context)]
        if plan.technology is Technology.MANIFEST_ONLY:
            return jobs

        jobs.append(_TreeJob(root / "client", "", context))
        technology_dir = root / plan.addin_type.value / plan.technology.value
        if plan.addin_type is AddinType.TASKPANE:
            jobs.append(_TreeJob(technology_dir, "", context))
            return jobs

        for kind in plan.form_kinds():
            directory, title, item_cast = _FORM_LAYOUT[kind]
            form_context = {**context, "form_title": title, "item_cast": item_cast}
            jobs.append(_TreeJob(technology_dir, directory, form_context))
        return jobs


def _join(prefix: str, relative: Path) -> str:
    posix = relative.as_posix()
    return f"{prefix}/{posix}" if prefix else posix
