from __future__ import annotations

import json
from pathlib import Path

import pytest

from addinkit.errors import UnsupportedTechnology
from addinkit.planner import ManifestPlanner
from addinkit.scaffold import AddinScaffolder
from addinkit.template import TemplateRenderer

MANIFEST_FILE_NAME = "manifest-my-office-add-in.xml"

DEV_DEPENDENCIES = {
    "chalk": "^1.1.1",
    "gulp": "^3.9.0",
    "gulp-load-plugins": "^1.0.0",
    "gulp-task-listing": "^1.0.1",
    "gulp-webserver": "^0.9.1",
    "minimist": "^1.2.0",
    "xmllint": "git+https://github.com/kripken/xml.js.git",
}

CLIENT_FILES = [
    ".bowerrc",
    "bower.json",
    "package.json",
    "gulpfile.js",
    MANIFEST_FILE_NAME,
    "manifest.xsd",
    "tsd.json",
    "jsconfig.json",
    "tsconfig.json",
    "content/Office.css",
    "images/close.png",
]


def _html_form(directory: str) -> list[str]:
    return [
        f"{directory}/app.js",
        f"{directory}/app.css",
        f"{directory}/home/home.js",
        f"{directory}/home/home.html",
        f"{directory}/home/home.css",
    ]


@pytest.fixture()
def scaffolder(id_factory) -> AddinScaffolder:
    return AddinScaffolder(TemplateRenderer(), ManifestPlanner(id_factory))


def _load_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def _assert_files(root: Path, expected: list[str]) -> None:
    for relative in expected:
        assert (root / relative).is_file(), f"expected {relative} to exist"


def test_mail_html_all_forms(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    result = scaffolder.create(mail_options(), tmp_path)

    expected = CLIENT_FILES + _html_form("appcompose") + _html_form("appread")
    _assert_files(tmp_path, expected)
    assert sorted(result.files) == sorted(expected)
    assert result.identity.slug == "my-office-add-in"


def test_mail_html_read_forms_only(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    scaffolder.create(mail_options(selected_forms=["mail-read", "appointment-read"]), tmp_path)

    _assert_files(tmp_path, CLIENT_FILES + _html_form("appread"))
    assert not (tmp_path / "appcompose").exists()


def test_mail_html_compose_forms_only(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    scaffolder.create(mail_options(selected_forms=["mail-compose", "appointment-compose"]), tmp_path)

    _assert_files(tmp_path, CLIENT_FILES + _html_form("appcompose"))
    assert not (tmp_path / "appread").exists()


def test_mail_html_package_manifests(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    scaffolder.create(mail_options(), tmp_path)

    bower = _load_json(tmp_path / "bower.json")
    assert bower["name"] == "my-office-add-in"
    assert bower["version"] == "0.1.0"
    assert bower["dependencies"] == {
        "microsoft.office.js": "*",
        "jquery": "~1.9.1",
        "office-ui-fabric": "*",
    }

    package = _load_json(tmp_path / "package.json")
    assert package["name"] == "my-office-add-in"
    assert package["version"] == "0.1.0"
    assert package["scripts"] == {"postinstall": "bower install"}
    assert package["devDependencies"] == DEV_DEPENDENCIES

    installed = _load_json(tmp_path / "tsd.json")["installed"]
    assert "jquery/jquery.d.ts" in installed
    assert "office-js/office-js.d.ts" in installed
    assert not any(key.startswith("angularjs/") for key in installed)


def test_mail_form_templates_are_rendered_per_form(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    scaffolder.create(mail_options(), tmp_path)

    read_script = (tmp_path / "appread" / "home" / "home.js").read_text(encoding="utf-8")
    compose_script = (tmp_path / "appcompose" / "home" / "home.js").read_text(encoding="utf-8")
    assert "Office.cast.item.toItemRead(" in read_script
    assert "Office.cast.item.toItemCompose(" in compose_script
    assert "<title>My Office Add-in</title>" in (tmp_path / "appread" / "home" / "home.html").read_text(
        encoding="utf-8"
    )


def test_mail_ng_layout(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    scaffolder.create(mail_options(technology="ng", selected_forms=["mail-read"]), tmp_path)

    _assert_files(
        tmp_path,
        [
            "appread/index.html",
            "appread/app.module.js",
            "appread/app.routes.js",
            "appread/home/home.controller.js",
            "appread/home/home.html",
            "appread/services/data.service.js",
        ],
    )
    home = (tmp_path / "appread" / "home" / "home.html").read_text(encoding="utf-8")
    assert "{{ vm.title }}" in home
    assert "My Office Add-in" in home


@pytest.mark.parametrize("task", ["help", "default", "serve-static", "validate-xml"])
def test_gulpfile_tasks(tmp_path: Path, scaffolder: AddinScaffolder, mail_options, task):
    scaffolder.create(mail_options(), tmp_path)
    gulpfile = (tmp_path / "gulpfile.js").read_text(encoding="utf-8")
    assert f"gulp.task('{task}'," in gulpfile
    assert f"manifest: '{MANIFEST_FILE_NAME}'" in gulpfile


def test_taskpane_ng(tmp_path: Path, scaffolder: AddinScaffolder, taskpane_options):
    scaffolder.create(taskpane_options(), tmp_path)

    _assert_files(
        tmp_path,
        CLIENT_FILES
        + [
            "index.html",
            "app/app.module.js",
            "app/app.routes.js",
            "app/home/home.controller.js",
            "app/home/home.html",
            "app/services/data.service.js",
        ],
    )

    bower = _load_json(tmp_path / "bower.json")
    assert bower["dependencies"] == {
        "microsoft.office.js": "*",
        "angular": "~1.4.4",
        "angular-route": "~1.4.4",
        "angular-sanitize": "~1.4.4",
        "office-ui-fabric": "*",
    }

    installed = _load_json(tmp_path / "tsd.json")["installed"]
    for typing in (
        "angularjs/angular.d.ts",
        "angularjs/angular-route.d.ts",
        "angularjs/angular-sanitize.d.ts",
        "office-js/office-js.d.ts",
    ):
        assert typing in installed


def test_taskpane_html(tmp_path: Path, scaffolder: AddinScaffolder, taskpane_options):
    scaffolder.create(taskpane_options(technology="html"), tmp_path)

    _assert_files(tmp_path, CLIENT_FILES + _html_form("app"))
    assert not (tmp_path / "index.html").exists()


def test_manifest_only(tmp_path: Path, scaffolder: AddinScaffolder, taskpane_options):
    options = taskpane_options(
        display_name="Some's bad * character$ ~!@#$%^&*()",
        technology="manifest-only",
        start_page_override="https://localhost:8443/manifest-only/index.html",
    )
    result = scaffolder.create(options, tmp_path)

    assert sorted(result.files) == sorted(
        ["package.json", "gulpfile.js", "manifest-somes-bad-character.xml", "manifest.xsd"]
    )
    package = _load_json(tmp_path / "package.json")
    assert package["name"] == "somes-bad-character"
    assert package["devDependencies"] == DEV_DEPENDENCIES
    assert "scripts" not in package
    assert not (tmp_path / "bower.json").exists()


def test_mail_manifest_only(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    url = "https://localhost:8443/manifest-only/index.html"
    result = scaffolder.create(mail_options(technology="manifest-only", start_page_override=url), tmp_path)

    assert sorted(result.files) == sorted(["package.json", "gulpfile.js", MANIFEST_FILE_NAME, "manifest.xsd"])
    assert not (tmp_path / "appread").exists()
    assert not (tmp_path / "appcompose").exists()
    assert not (tmp_path / "bower.json").exists()
    assert {entry.start_page_url for entry in result.plan.form_entries} == {url}
    assert len(result.plan.form_entries) == 2
    manifest = (tmp_path / MANIFEST_FILE_NAME).read_text(encoding="utf-8")
    assert manifest.count(f'<SourceLocation DefaultValue="{url}" />') == 2


def test_outlook_pages_load_no_placeholder_scripts(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    scaffolder.create(mail_options(), tmp_path)
    scaffolder.create(mail_options(technology="ng"), tmp_path / "ng")

    assert not (tmp_path / "scripts").exists()
    for page in ("appread/home/home.html", "ng/appread/index.html"):
        assert "MicrosoftAjax" not in (tmp_path / page).read_text(encoding="utf-8")


UNSAFE_NAME = "Tom & Jerry <b> */ {{ 1+1 }}"


def test_display_name_is_escaped_in_html_pages(tmp_path: Path, scaffolder: AddinScaffolder, taskpane_options):
    result = scaffolder.create(taskpane_options(technology="html", display_name=UNSAFE_NAME), tmp_path)

    page = (tmp_path / "app" / "home" / "home.html").read_text(encoding="utf-8")
    assert "<title>Tom &amp; Jerry &lt;b&gt; */ {{ 1+1 }}</title>" in page
    assert "<b>" not in page
    assert result.identity.slug == "tom-jerry-b-11"


def test_display_name_cannot_close_css_comments(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    scaffolder.create(mail_options(display_name="A */ body{display:none} /* B"), tmp_path)

    for stylesheet in ("content/Office.css", "appread/app.css", "appcompose/app.css"):
        first_line = (tmp_path / stylesheet).read_text(encoding="utf-8").splitlines()[0]
        assert "display:none" not in first_line
        assert first_line.count("*/") == 1


def test_display_name_is_not_bound_by_angular(tmp_path: Path, scaffolder: AddinScaffolder, taskpane_options):
    scaffolder.create(taskpane_options(display_name=UNSAFE_NAME), tmp_path)

    home = (tmp_path / "app" / "home" / "home.html").read_text(encoding="utf-8")
    assert '<h1 class="ms-font-xl" ng-non-bindable>Tom &amp; Jerry &lt;b&gt; */ {{ 1+1 }}</h1>' in home
    index = (tmp_path / "index.html").read_text(encoding="utf-8")
    assert "<title>Tom &amp; Jerry &lt;b&gt; */ {{ 1+1 }}</title>" in index

def test_close_image_is_copied_verbatim(tmp_path: Path, scaffolder: AddinScaffolder, taskpane_options):
    scaffolder.create(taskpane_options(), tmp_path)
    source = scaffolder.template_root / "client" / "images" / "close.png"
    assert (tmp_path / "images" / "close.png").read_bytes() == source.read_bytes()


def test_manifest_is_written_with_plan_id(tmp_path: Path, scaffolder: AddinScaffolder, taskpane_options):
    result = scaffolder.create(taskpane_options(), tmp_path)
    manifest = (tmp_path / MANIFEST_FILE_NAME).read_text(encoding="utf-8")
    assert f"<Id>{result.plan.id}</Id>" in manifest


def test_scaffolder_respects_force(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    scaffolder.create(mail_options(), tmp_path)
    (tmp_path / "gulpfile.js").write_text("custom", encoding="utf-8")

    with pytest.raises(FileExistsError):
        scaffolder.create(mail_options(), tmp_path)
    assert (tmp_path / "gulpfile.js").read_text(encoding="utf-8") == "custom"

    scaffolder.create(mail_options(), tmp_path, force=True)
    assert "gulp.task('help'," in (tmp_path / "gulpfile.js").read_text(encoding="utf-8")


def test_collision_leaves_directory_untouched(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    (tmp_path / "appread" / "home").mkdir(parents=True)
    (tmp_path / "appread" / "home" / "home.js").write_text("mine", encoding="utf-8")

    with pytest.raises(FileExistsError):
        scaffolder.create(mail_options(), tmp_path)
    assert not (tmp_path / "package.json").exists()


def test_unsupported_technology_writes_nothing(tmp_path: Path, scaffolder: AddinScaffolder, mail_options):
    target = tmp_path / "project"
    with pytest.raises(UnsupportedTechnology):
        scaffolder.create(mail_options(technology="react"), target)
    assert not target.exists()
