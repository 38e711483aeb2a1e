import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.config import PreviewConfig
from core.state import AppState, Notify
from player.audio import InteractionGate, QtAudioBackend
from ui.main_window import MainWindow

def setup_logging() -> None:
    level = (os.getenv("PREVIEW_LOG_LEVEL") or "INFO").upper()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))

def init_app_state(qt_app: QApplication, argv: list[str]) -> AppState:
    config = PreviewConfig.from_env()
    if len(argv) > 1:
        config = replace(config, tracks_file=argv[1])

    app_state = AppState(config)

    gate = InteractionGate(qt_app, engaged=not config.require_gesture)
    qt_app.installEventFilter(gate)

    try:
        app_state.audio = QtAudioBackend(gate=gate)
    except Exception as e:
        app_state.audio = None
        app_state.queued_notifications.append(
            Notify(message=f"Failed to initialize audio output: {e}", notify_type="error")
        )

    return app_state

def main() -> int:
    setup_logging()
    qt_app = QApplication(sys.argv)

    try:
        app_state = init_app_state(qt_app, qt_app.arguments())
    except ValueError as e:
        logging.getLogger(__name__).error("Invalid configuration: %s", e)
        return 2

    main_window = MainWindow(app_state)
    main_window.show()

    return qt_app.exec()

if __name__ == "__main__":
    raise SystemExit(main())
