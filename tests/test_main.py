from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from wsl_bootstrap.catalog import APPS, FEATURES
from wsl_bootstrap.lib.host import OsVersion
from wsl_bootstrap.lib.tasks import ReentryTask
from wsl_bootstrap.main import EXIT_FATAL, EXIT_OK, main, reentry_invocation, run

from .fakes import FakeFeatures, FakeHost, FakePackages, FakePower, FakeTasks, FakeWsl, make_caps

ALL_FEATURES = [f.identifier for f in FEATURES]


@pytest.fixture
def paths(tmp_path):
    return {
        "state": tmp_path / "data" / "state.json",
        "log": tmp_path / "data" / "wsl-bootstrap.log",
        "install_log": tmp_path / "Desktop" / "winget_install_log.txt",
    }


def _argv(paths):
    return [
        "--state",
        str(paths["state"]),
        "--log",
        str(paths["log"]),
        "--install-log",
        str(paths["install_log"]),
    ]


def _resumed_tasks():
    tasks = FakeTasks()
    tasks.register(ReentryTask(name="ResumeWSLSetupTask", execute="python.exe", arguments=""))
    tasks.registered.clear()
    return tasks


def test_fresh_machine_registers_task_restarts_and_stops(paths):
    tasks, power, wsl, packages = FakeTasks(), FakePower(), FakeWsl(), FakePackages()
    caps = make_caps(features=FakeFeatures(), tasks=tasks, power=power, wsl=wsl, packages=packages)

    assert main(_argv(paths), caps=caps) == EXIT_OK

    assert len(tasks.registered) == 1
    assert power.restarts == [10]
    assert wsl.mutations == []
    assert packages.installed == []
    assert not paths["install_log"].exists()
    journal = json.loads(paths["state"].read_text(encoding="utf-8"))
    assert journal["phase"] == "awaiting_reboot"


def test_reentry_task_forwards_resolved_paths(paths):
    tasks = FakeTasks()
    main(_argv(paths), caps=make_caps(tasks=tasks))
    arguments = tasks.registered[0].arguments
    assert str(paths["install_log"].resolve()) in arguments
    assert str(paths["state"].resolve()) in arguments


def test_already_provisioned_machine_makes_no_mutations_but_installs_apps(paths):
    features = FakeFeatures(enabled=ALL_FEATURES)
    wsl = FakeWsl(default=2, distributions=["Debian"])
    tasks, power, packages = FakeTasks(), FakePower(), FakePackages()
    caps = make_caps(features=features, wsl=wsl, tasks=tasks, power=power, packages=packages)

    assert main(_argv(paths), caps=caps) == EXIT_OK

    assert features.enable_calls == []
    assert wsl.mutations == []
    assert tasks.registered == []
    assert tasks.unregistered == []
    assert power.restarts == []
    assert packages.installed == [a.package_id for a in APPS]
    assert paths["install_log"].exists()
    # Completed workflows leave no journal behind.
    assert not paths["state"].exists()


def test_resumed_run_finishes_and_removes_task(paths):
    tasks = _resumed_tasks()
    features = FakeFeatures(enabled=ALL_FEATURES)
    wsl = FakeWsl(default=1, distributions=[])
    packages = FakePackages()
    caps = make_caps(features=features, tasks=tasks, wsl=wsl, packages=packages)

    state = run(
        state_path=str(paths["state"]),
        log_path=str(paths["log"]),
        install_log=str(paths["install_log"]),
        caps=caps,
    )

    assert state.has_resumed is True
    assert state.phase.value == "complete"
    assert wsl.mutations == ["set-default-version 2", "install Debian"]
    assert packages.installed == [a.package_id for a in APPS]
    assert tasks.unregistered == ["ResumeWSLSetupTask"]
    assert state.install_report["failed"] == []

    again = run(
        state_path=str(paths["state"]),
        log_path=str(paths["log"]),
        install_log=str(paths["install_log"]),
        caps=caps,
    )
    assert again.has_resumed is False
    assert tasks.registered == []


def test_missing_winget_is_fatal_before_any_install(paths):
    packages = FakePackages(available=False)
    caps = make_caps(features=FakeFeatures(enabled=ALL_FEATURES), wsl=FakeWsl(default=2, distributions=["Debian"]), packages=packages)

    assert main(_argv(paths), caps=caps) == EXIT_FATAL
    assert packages.installed == []
    assert not paths["install_log"].exists()


@pytest.mark.parametrize(
    "host",
    [FakeHost(admin=False), FakeHost(version=OsVersion(10, 18363))],
)
def test_preflight_failure_exits_without_touching_anything(paths, host):
    features, tasks = FakeFeatures(), FakeTasks()
    caps = make_caps(host=host, features=features, tasks=tasks)

    assert main(_argv(paths), caps=caps) == EXIT_FATAL
    assert features.enable_calls == []
    assert tasks.registered == []
    assert not paths["state"].exists()


def test_failed_app_does_not_change_exit_code(paths):
    packages = FakePackages(failing={APPS[1].package_id: 1})
    caps = make_caps(
        features=FakeFeatures(enabled=ALL_FEATURES),
        wsl=FakeWsl(default=2, distributions=["Debian"]),
        packages=packages,
    )
    assert main(_argv(paths), caps=caps) == EXIT_OK
    assert len(packages.installed) == len(APPS)


def test_abort_on_error_is_fatal(paths):
    packages = FakePackages(failing={APPS[0].package_id: 1})
    caps = make_caps(
        features=FakeFeatures(enabled=ALL_FEATURES),
        wsl=FakeWsl(default=2, distributions=["Debian"]),
        packages=packages,
    )
    assert main([*_argv(paths), "--abort-on-error"], caps=caps) == EXIT_FATAL
    assert packages.installed == [APPS[0].package_id]
    journal = json.loads(paths["state"].read_text(encoding="utf-8"))
    assert journal["errors"][0]["step"] == "50_install_apps"


def test_stop_after_runs_partial_pipeline(paths):
    features = FakeFeatures(enabled=ALL_FEATURES)
    wsl = FakeWsl()
    caps = make_caps(features=features, wsl=wsl)
    state = run(
        state_path=str(paths["state"]),
        log_path=str(paths["log"]),
        install_log=str(paths["install_log"]),
        stop_after="10_enable_features",
        caps=caps,
    )
    assert state.completed_steps == ["00_preflight", "05_detect_resume", "10_enable_features"]
    assert wsl.mutations == []


def test_reentry_for_plain_script(tmp_path):
    script = tmp_path / "my setup" / "cli.py"
    script.parent.mkdir()
    script.write_text("", encoding="utf-8")

    execute, arguments = reentry_invocation(["--dry-run"], argv0=str(script), executable=sys.executable)

    assert execute == str(Path(sys.executable).resolve())
    assert arguments == f'-u -s "{script.resolve()}" --dry-run'


def test_reentry_for_module_run(tmp_path):
    main_py = tmp_path / "wsl_bootstrap" / "__main__.py"
    execute, arguments = reentry_invocation([], argv0=str(main_py), executable=sys.executable)
    assert execute == str(Path(sys.executable).resolve())
    assert arguments == "-u -s -m wsl_bootstrap"


def test_reentry_for_console_script_launcher(tmp_path):
    launcher = tmp_path / "wsl-bootstrap.exe"
    launcher.write_bytes(b"MZ")
    execute, arguments = reentry_invocation(
        ["--state", "C:\\data\\state.json"], argv0=str(tmp_path / "wsl-bootstrap"), executable=sys.executable
    )
    assert execute == str(launcher.resolve())
    assert arguments == "--state C:\\data\\state.json"


@pytest.mark.parametrize(
    "body",
    ["apps: Git.Git\n", "restart_delay_seconds: soon\n"],
)
def test_invalid_config_exits_before_any_change(paths, tmp_path, body):
    cfg = tmp_path / "bootstrap.yaml"
    cfg.write_text(body, encoding="utf-8")
    features, tasks, power = FakeFeatures(), FakeTasks(), FakePower()
    caps = make_caps(features=features, tasks=tasks, power=power)

    assert main([*_argv(paths), "--config", str(cfg)], caps=caps) == EXIT_FATAL
    assert features.enable_calls == []
    assert tasks.registered == []
    assert power.restarts == []
    assert not paths["state"].exists()


def test_dry_run_reboot_path_writes_no_journal(paths):
    tasks = FakeTasks()
    caps = make_caps(features=FakeFeatures(), tasks=tasks)

    assert main([*_argv(paths), "--dry-run"], caps=caps) == EXIT_OK
    assert len(tasks.registered) == 1
    assert not paths["state"].exists()


def test_dry_run_on_resumed_machine_plans_continuation(paths):
    tasks = _resumed_tasks()
    packages = FakePackages()
    caps = make_caps(
        features=FakeFeatures(enabled=ALL_FEATURES),
        tasks=tasks,
        wsl=FakeWsl(default=2, distributions=["Debian"]),
        packages=packages,
    )
    paths["install_log"].parent.mkdir(parents=True)
    paths["install_log"].write_text("previous real run\n", encoding="utf-8")

    assert main([*_argv(paths), "--dry-run", "--stop-after", "50_install_apps"], caps=caps) == EXIT_OK
    assert packages.installed == [a.package_id for a in APPS]
    assert paths["install_log"].read_text(encoding="utf-8") == "previous real run\n"
    assert not paths["state"].exists()
