import sys
import os
import time
import logging

# Ensure the main project directory is in the Python path
# This helps ensure that imports like 'from core.presentation_manager import PresentationManager'
# work regardless of how the script is run, and lets presentation scripts import commands.factories.
project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from PySide6.QtWidgets import QApplication, QFileDialog, QMessageBox

from core.app_config_manager import ApplicationConfigManager
from core.constants import APP_NAME, ORGANIZATION_NAME
from core.errors import PresentationError
from core.input_adapter import InputAdapter
from core.logging_config import setup_logging
from core.overlay_notifier import OverlayNotifier
from core.presentation_io import PresentationIO
from core.presentation_manager import PresentationManager
from rendering.svg_scene import SvgScene
from windows.presentation_window import PresentationWindow


def _ask_for_script(config: ApplicationConfigManager) -> str:
    recent = config.get_recent_files()
    start_dir = os.path.dirname(recent[0]) if recent else os.getcwd()
    filepath, _ = QFileDialog.getOpenFileName(None, "Open Presentation", start_dir, "Presentation scripts (*.py)")
    return filepath


def main(argv=None) -> int:
    argv = list(sys.argv if argv is None else argv)
    app_start_time = time.perf_counter()
    app = QApplication(argv)
    app.setOrganizationName(ORGANIZATION_NAME)
    app.setApplicationName(APP_NAME)

    config = ApplicationConfigManager()
    setup_logging(config.log_level)

    script_path = argv[1] if len(argv) > 1 else _ask_for_script(config)
    if not script_path:
        logging.info("No presentation selected. Exiting.")
        return 0

    try:
        script = PresentationIO().load_script(script_path)
        svg_scene = SvgScene.from_file(script.scene_path)
    except (OSError, ValueError, PresentationError) as e:
        logging.error(f"Could not open presentation {script_path}: {e}")
        QMessageBox.critical(None, APP_NAME, f"Could not open presentation:\n{e}")
        return 1
    config.add_recent_file(script.path)

    notifier = OverlayNotifier()
    manager = PresentationManager(svg_scene, notifier=notifier, strict=config.developer_mode)
    window = PresentationWindow(svg_scene, notifier=notifier, logo_path=config.get_app_setting("logo_path"),
                                title=script.title)
    window.install_input_adapter(InputAdapter(manager, notifier, parent=window))

    screen = config.get_target_output_screen()
    if screen is not None:
        window.setGeometry(screen.geometry())
    if config.fullscreen:
        window.showFullScreen()
    else:
        window.resize(1280, 720)
        window.show()

    manager.start(script.slides)
    if manager.failures:
        logging.warning(f"{len(manager.failures)} command(s) failed while starting the presentation")

    logging.info(f"Presentation ready after {time.perf_counter() - app_start_time:.2f}s")
    app.aboutToQuit.connect(config.save_all_configs)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
