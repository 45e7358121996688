import pytest

from betterdocs import dsl
from betterdocs.dsl import default_open_command, docs_pipeline, sh
from betterdocs.errors import (
    ArtifactOpenFailure,
    BuildFailure,
    CleanupFailure,
    DocGenerationFailure,
    EnvironmentSetupFailure,
    SiteBuildFailure,
    StepFailure,
)


def test_pipeline_follows_the_script_order(config, project):
    pipeline = docs_pipeline(config, env={})

    assert pipeline.root == project.resolve()
    assert pipeline.step_names() == [dsl.PROFILE, dsl.BUILD, dsl.CLEAN, dsl.APIDOC, dsl.SITE, dsl.OPEN]
    assert [s.failure for s in pipeline.steps] == [
        EnvironmentSetupFailure,
        BuildFailure,
        CleanupFailure,
        DocGenerationFailure,
        SiteBuildFailure,
        ArtifactOpenFailure,
    ]
    assert [s.fatal for s in pipeline.steps] == [True, True, True, True, True, False]


def test_step_commands_and_directories(config, project):
    config.apidoc_args = ["--force", "--separate"]
    config.apidoc_exclude = ["mypkg/tests"]
    steps = {s.name: s for s in docs_pipeline(config, env={}).steps}
    root = project.resolve()

    assert steps[dsl.PROFILE].data["files"] == [
        str(root / "venv" / "bin" / "activate"),
        str(root / "env.sh"),
    ]
    assert steps[dsl.BUILD].run == ["build-tool"]
    assert steps[dsl.BUILD].cwd is None
    assert steps[dsl.CLEAN].data == {"target": "docs/source"}
    assert steps[dsl.APIDOC].run == [
        "apidoc-tool", "--force", "--separate", "-o", "source", "../mypkg", "mypkg/tests",
    ]
    assert steps[dsl.APIDOC].cwd == "docs"
    assert steps[dsl.SITE].run == ["site-tool"]
    assert steps[dsl.SITE].cwd == "docs"
    assert steps[dsl.OPEN].run == ["open-tool", str(root / "docs" / "_build" / "html" / "index.html")]


def test_defaults_reproduce_the_original_script(bare_config):
    bare_config.build_command = ["python", "setup.py", "build"]
    bare_config.apidoc_command = ["sphinx-apidoc"]
    bare_config.site_command = ["make", "html"]
    steps = {s.name: s for s in docs_pipeline(bare_config, env={}).steps}

    assert steps[dsl.BUILD].run == ["python", "setup.py", "build"]
    assert steps[dsl.APIDOC].run == ["sphinx-apidoc", "-o", "source", "../mypkg"]
    assert steps[dsl.SITE].run == ["make", "html"]


def test_no_profile_step_without_venv_or_profile(bare_config):
    names = docs_pipeline(bare_config, env={}).step_names()

    assert dsl.PROFILE not in names
    assert names[0] == dsl.BUILD


def test_profile_only_or_venv_only(config):
    config.venv = None
    steps = docs_pipeline(config, env={}).steps
    assert steps[0].data["files"][-1].endswith("env.sh")
    assert len(steps[0].data["files"]) == 1


@pytest.mark.parametrize("config_value, override, expected", [
    (True, None, True),
    (False, None, False),
    (True, False, False),
    (False, True, True),
])
def test_open_step_toggle(config, config_value, override, expected):
    config.open_artifact = config_value
    names = docs_pipeline(config, open_artifact=override, env={}).step_names()

    assert (dsl.OPEN in names) is expected


def test_environment_overlay(config, monkeypatch):
    monkeypatch.setenv("FROM_PROCESS", "1")
    config.env = {"SPHINXOPTS": "-W"}

    assert docs_pipeline(config, env={"A": "b"}).env == {"A": "b", "SPHINXOPTS": "-W"}

    env = docs_pipeline(config).env
    assert env["FROM_PROCESS"] == "1"
    assert env["SPHINXOPTS"] == "-W"


def test_timeouts_are_attached_by_step_name(config):
    config.timeouts = {dsl.SITE: 300.0, dsl.PROFILE: 10}
    steps = {s.name: s for s in docs_pipeline(config, env={}).steps}

    assert steps[dsl.SITE].timeout == 300.0
    assert steps[dsl.PROFILE].timeout == 10
    assert steps[dsl.BUILD].timeout is None


@pytest.mark.parametrize("platform, expected", [
    ("darwin", ["open"]),
    ("linux", ["xdg-open"]),
    ("freebsd13", ["xdg-open"]),
    ("win32", ["cmd", "/c", "start", ""]),
])
def test_default_open_command(platform, expected):
    assert default_open_command(platform) == expected


def test_sh_helper():
    step = sh("lint", ["ruff", "check"], cwd="src")

    assert step.kind == "sh"
    assert step.run == ["ruff", "check"]
    assert step.failure is StepFailure
    assert step.fatal
