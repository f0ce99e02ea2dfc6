from __future__ import annotations

import argparse
from pathlib import Path

from PySide6.QtWidgets import QApplication

from illien import __version__
from illien.logging_setup import SESSION_ID, install_global_exception_hooks, log, setup_logging
from illien.settings import APP_NAME


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog=APP_NAME, description="A minimal Markdown journal")
    p.add_argument(
        "--dir",
        type=Path,
        default=None,
        help="Journal directory (remembered for next start)",
    )
    p.add_argument(
        "--flush-before-switch",
        action="store_true",
        default=None,
        help="Save pending edits before switching entries",
    )
    p.add_argument("--debug", action="store_true", help="Verbose console logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(debug=args.debug)
    install_global_exception_hooks()

    # imported late: the window pulls in QtWidgets-heavy modules
    from illien.ui.main_window import JournalWindow

    app = QApplication([])
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_NAME)

    directory = None
    if args.dir is not None:
        args.dir.mkdir(parents=True, exist_ok=True)
        directory = str(args.dir.resolve())

    win = JournalWindow(
        directory_override=directory,
        flush_before_switch=args.flush_before_switch,
    )
    win.show()
    log.info("Application started, SID=%s", SESSION_ID)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
