"""Command line interface for generating Office add-in projects."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from .config import AddinType, OutlookForm, ProjectOptions, Technology
from .errors import ScaffoldError
from .planner import ManifestPlanner
from .scaffold import AddinScaffolder
from .template import TemplateRenderingError

LOGGER = logging.getLogger(__name__)

DEFAULT_HOSTS = ("Document", "Workbook", "Presentation", "Project")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Display name for the new add-in")
    parser.add_argument(
        "-d",
        "--directory",
        type=Path,
        default=Path.cwd(),
        help="Target directory where the project should be created",
    )
    parser.add_argument(
        "-t",
        "--tech",
        default=Technology.HTML.value,
        help="Technology used to build the add-in (html, ng or manifest-only)",
    )
    parser.add_argument(
        "--start-page",
        help="Start page URL, required when --tech is manifest-only",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing files instead of failing",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the manifest plan as JSON without writing any files",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every generated file",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scaffold Office add-in projects")
    subparsers = parser.add_subparsers(dest="command", required=True)

    mail_parser = subparsers.add_parser("mail", help="create an Outlook add-in")
    _add_common_arguments(mail_parser)
    mail_parser.add_argument(
        "--form",
        dest="forms",
        action="append",
        choices=[form.value for form in OutlookForm],
        help="Outlook form the add-in activates on (repeatable, defaults to all)",
    )

    taskpane_parser = subparsers.add_parser("taskpane", help="create a task-pane add-in")
    _add_common_arguments(taskpane_parser)
    taskpane_parser.add_argument(
        "--host",
        dest="hosts",
        action="append",
        help="Host application the add-in supports (repeatable, defaults to all)",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_options(args: argparse.Namespace) -> ProjectOptions:
    addin_type = AddinType(args.command)
    if addin_type is AddinType.MAIL:
        forms = args.forms or [form.value for form in OutlookForm]
        return ProjectOptions(
            display_name=args.name,
            addin_type=addin_type,
            technology=args.tech,
            selected_forms=forms,
            start_page_override=args.start_page,
        )

    return ProjectOptions(
        display_name=args.name,
        addin_type=addin_type,
        technology=args.tech,
        selected_hosts=args.hosts or list(DEFAULT_HOSTS),
        start_page_override=args.start_page,
    )


def _handle_generate(args: argparse.Namespace) -> int:
    options = _build_options(args)
    if args.dry_run:
        plan = ManifestPlanner().plan(options)
        sys.stdout.write(plan.model_dump_json(indent=2))
        sys.stdout.write("\n")
        return 0

    scaffolder = AddinScaffolder()
    result = scaffolder.create(options, args.directory, force=args.force)
    print(f"Add-in '{result.identity.display_name}' created at {result.path}")
    print(f"Manifest: {result.identity.manifest_file_name}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return _handle_generate(args)
    except (ScaffoldError, ValidationError) as exc:
        LOGGER.debug("generation failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except FileExistsError as exc:
        print(f"error: {exc} (use --force to overwrite)", file=sys.stderr)
        return 1
    except (TemplateRenderingError, OSError) as exc:
        LOGGER.debug("writing the project failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
