from __future__ import annotations

import argparse
import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .config import load_config
from .errors import BootstrapError, PreflightError, RebootScheduled
from .lib.env import PATHS
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import Capabilities, ProvisionCtx, run_pipeline
from .state_store import Phase, RunState, load_journal, persist
from .steps import (
    CleanupStep,
    DetectResumeStep,
    EnableFeaturesStep,
    InstallAppsStep,
    InstallDistroStep,
    PreflightStep,
    RebootIfNeededStep,
    WslDefaultVersionStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = PATHS.state_default

EXIT_OK = 0
EXIT_FATAL = 1


def build_steps():
    return [
        PreflightStep(),
        DetectResumeStep(),
        EnableFeaturesStep(),
        RebootIfNeededStep(),
        WslDefaultVersionStep(),
        InstallDistroStep(),
        InstallAppsStep(),
        CleanupStep(),
    ]


def reentry_invocation(
    forward_args: Sequence[str],
    *,
    argv0: Optional[str] = None,
    executable: Optional[str] = None,
) -> Tuple[str, str]:
    """Return (execute, arguments) that re-run this program the way it was started."""

    argv0 = sys.argv[0] if argv0 is None else argv0
    python = str(Path(executable or sys.executable).resolve())
    script = Path(argv0).resolve() if argv0 else None

    if script is not None and script.suffix.lower() == ".py" and script.name != "__main__.py":
        return python, subprocess.list2cmdline(["-u", "-s", str(script), *forward_args])

    if script is not None and script.suffix.lower() != ".py":
        # Console-script launcher (wsl-bootstrap.exe); pip may report it without the suffix.
        for candidate in (script, script.with_suffix(".exe")):
            if candidate.is_file():
                return str(candidate), subprocess.list2cmdline(list(forward_args))

    return python, subprocess.list2cmdline(["-u", "-s", "-m", "wsl_bootstrap", *forward_args])


def _forward_args(
    *,
    config_path: Optional[str],
    state_path: str,
    log_path: str,
    install_log: str,
    dry_run: bool,
) -> List[str]:
    # Absolute paths: the resumed run starts as SYSTEM in another working directory
    # with another profile, so the install log must still land on this user's desktop.
    args: List[str] = []
    if config_path:
        args += ["--config", str(Path(config_path).resolve())]
    args += ["--state", str(Path(state_path).resolve())]
    args += ["--log", str(Path(log_path).resolve())]
    args += ["--install-log", str(Path(install_log).resolve())]
    if dry_run:
        args.append("--dry-run")
    return args


def run(
    *,
    config_path: Optional[str] = None,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    install_log: Optional[str] = None,
    dry_run: bool = False,
    abort_on_error: bool = False,
    stop_after: Optional[str] = None,
    caps: Optional[Capabilities] = None,
) -> RunState:
    """Run the bootstrap workflow.

    Raises RebootScheduled when the run ends in a restart, PreflightError when
    an environment precondition is unmet.
    """

    cfg = load_config(config_path).with_overrides(
        install_log=install_log,
        dry_run=True if dry_run else None,
        abort_on_error=True if abort_on_error else None,
    )
    configure_logging(log_path=log_path, install_log=cfg.install_log, dry_run=cfg.dry_run)
    if cfg.dry_run:
        logger.info("Dry run: changes are logged, not executed; read-only queries still run")

    execute, arguments = reentry_invocation(
        _forward_args(
            config_path=config_path,
            state_path=state_path,
            log_path=log_path,
            install_log=cfg.install_log,
            dry_run=cfg.dry_run,
        )
    )
    ctx = ProvisionCtx(
        cfg=cfg,
        caps=caps or Capabilities.windows(dry_run=cfg.dry_run),
        state_path=state_path,
        reentry_execute=execute,
        reentry_arguments=arguments,
    )

    state = RunState()
    try:
        state.journal_phase = load_journal(state_path).get("phase")
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable journal %s: %s", state_path, e)

    try:
        result = run_pipeline(ctx=ctx, state=state, steps=build_steps(), stop_after=stop_after)
        state = result.state
        logger.info("Ran steps: %s", ", ".join(result.ran_steps))
        return state
    except RebootScheduled:
        raise
    except Exception as e:
        if not isinstance(e, PreflightError):
            logger.exception("Bootstrap failed")
        state.errors.append({"step": state.current_step, "error": str(e)})
        raise
    finally:
        # Before preflight passes nothing may be written, not even the journal.
        if (
            not cfg.dry_run
            and PreflightStep.step_id in state.completed_steps
            and state.phase is not Phase.AWAITING_REBOOT
        ):
            persist(state_path, state)


def main(argv: Optional[list[str]] = None, *, caps: Optional[Capabilities] = None) -> int:
    p = argparse.ArgumentParser(
        prog="wsl-bootstrap",
        description="Enable WSL features, install Debian and developer apps; resumes itself after the reboot.",
    )
    p.add_argument("--config", default=None, help="Optional YAML config")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to the phase journal (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the bootstrap log")
    p.add_argument("--install-log", default=None, help="Path to the winget output log")
    p.add_argument("--dry-run", action="store_true", help="Log commands without executing them")
    p.add_argument("--abort-on-error", action="store_true", help="Stop at the first failed app install")
    p.add_argument("--stop-after", default=None, help="Stop after step_id (e.g. 40_install_distro)")

    args = p.parse_args(argv)

    try:
        run(
            config_path=args.config,
            state_path=args.state,
            log_path=args.log,
            install_log=args.install_log,
            dry_run=bool(args.dry_run),
            abort_on_error=bool(args.abort_on_error),
            stop_after=args.stop_after,
            caps=caps,
        )
    except RebootScheduled as e:
        print(str(e), file=sys.stdout)
        return EXIT_OK
    except PreflightError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL
    except BootstrapError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL
    return EXIT_OK
