from __future__ import annotations

from wsl_bootstrap.lib.tasks import ReentryTask
from wsl_bootstrap.state_store import Phase, RunState
from wsl_bootstrap.steps.step_05_detect_resume import DetectResumeStep, detect_resume

from .fakes import FakeTasks, make_caps, make_ctx


def test_detect_true_when_task_exists():
    tasks = FakeTasks()
    tasks.register(ReentryTask(name="ResumeWSLSetupTask", execute="python.exe", arguments=""))
    assert detect_resume(tasks, "ResumeWSLSetupTask") is True


def test_detect_false_when_absent():
    assert detect_resume(FakeTasks(), "ResumeWSLSetupTask") is False


def test_detect_false_when_lookup_errors():
    assert detect_resume(FakeTasks(lookup_error=True), "ResumeWSLSetupTask") is False


def test_step_warns_when_journal_says_awaiting_reboot_but_task_missing(tmp_path):
    ctx = make_ctx(tmp_path)
    state = RunState(journal_phase=Phase.AWAITING_REBOOT.value)
    state = DetectResumeStep().run(ctx, state)
    assert state.has_resumed is False
    assert state.phase is Phase.FRESH
    assert len(state.warnings) == 1


def test_step_marks_resumed(tmp_path):
    tasks = FakeTasks()
    tasks.register(ReentryTask(name="ResumeWSLSetupTask", execute="python.exe", arguments=""))
    ctx = make_ctx(tmp_path, caps=make_caps(tasks=tasks))
    state = DetectResumeStep().run(ctx, RunState())
    assert state.has_resumed is True
    assert state.phase is Phase.RESUMED
