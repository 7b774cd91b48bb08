from __future__ import annotations

from wsl_bootstrap.main import main as core_main


def main(argv: list[str] | None = None) -> int:
    # Run directly as a script, the reentry task re-invokes this same file.
    return core_main(argv)


if __name__ == "__main__":
    raise SystemExit(main())
