"""
Main Entry Point for w2w

Wires storage, data manager, scheduler, exporter and GUI together and
provides the primary application entry point with logging and global
error handling.
"""

import os
import sys
import logging
import traceback
from pathlib import Path
from datetime import datetime
from tkinter import messagebox

from .config import DATA_DIR_ENV_VAR, DEFAULT_DATA_DIR, LOG_DIR
from .data_manager import DataManager
from .reporting import ExportManager
from .scheduler_logic import ShiftScheduler
from .storage import FileStorage


def setup_logging():
    """Setup application logging"""
    LOG_DIR.mkdir(exist_ok=True)

    log_file = LOG_DIR / f"w2w_{datetime.now().strftime('%Y%m%d')}.log"

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler(sys.stdout)
        ]
    )

    return logging.getLogger(__name__)


def resolve_data_dir() -> Path:
    """Directory holding the persisted slots"""
    override = os.environ.get(DATA_DIR_ENV_VAR)
    if override:
        return Path(override)

    if getattr(sys, 'frozen', False):
        # Bundled executable (e.g. PyInstaller): keep data next to it
        return Path(sys.executable).parent / "data"

    return DEFAULT_DATA_DIR


def handle_exception(exc_type, exc_value, exc_traceback):
    """Global exception handler"""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    logger = logging.getLogger(__name__)
    logger.error(
        "Uncaught exception",
        exc_info=(exc_type, exc_value, exc_traceback)
    )

    # Show error dialog if GUI is available
    try:
        error_msg = f"An unexpected error occurred:\n\n{exc_type.__name__}: {exc_value}"
        messagebox.showerror("Application Error", error_msg)
    except Exception as e:
        logger.error(f"Failed to show error dialog: {e}")


class W2WApp:
    """Main application class"""

    def __init__(self, data_dir: Path = None):
        self.logger = logging.getLogger(__name__)
        self.data_dir = data_dir
        self.data_manager = None
        self.scheduler = None
        self.export_manager = None
        self.main_window = None

    def initialize(self):
        """Initialize application components"""
        try:
            self.logger.info("Initializing w2w")

            data_dir = self.data_dir or resolve_data_dir()
            data_dir.mkdir(parents=True, exist_ok=True)
            self.logger.info(f"Persistent data directory: {data_dir}")

            self.data_manager = DataManager(FileStorage(data_dir))
            self.logger.info("Data manager initialized with persistent storage")

            self.scheduler = ShiftScheduler(self.data_manager)
            self.export_manager = ExportManager(self.data_manager)
            self.logger.info("Scheduler and export manager initialized")

            return True

        except Exception as e:
            self.logger.error(f"Failed to initialize application: {e}")
            self.logger.error(traceback.format_exc())
            return False

    def run(self):
        """Run the main application"""
        try:
            if not self.initialize():
                self.show_initialization_error()
                return False

            self.logger.info("Starting GUI application")

            # Imported here so initialization errors surface before any window exists
            from .ui import MainWindow

            self.main_window = MainWindow(
                data_manager=self.data_manager,
                scheduler=self.scheduler,
                export_manager=self.export_manager
            )
            self.main_window.mainloop()

            self.logger.info("Application closed normally")
            return True

        except Exception as e:
            self.logger.error(f"Application error: {e}")
            self.logger.error(traceback.format_exc())
            self.show_runtime_error(e)
            return False

        finally:
            self.cleanup()

    def show_initialization_error(self):
        """Show initialization error dialog"""
        try:
            import tkinter as tk
            root = tk.Tk()
            root.withdraw()

            error_msg = """
Failed to initialize w2w.

Please check:
1. You have write permissions in the data directory
2. The logs directory for detailed error information
            """
            messagebox.showerror("Initialization Error", error_msg.strip())

            root.destroy()

        except Exception as e:
            print(f"Failed to show initialization error: {e}")

    def show_runtime_error(self, error):
        """Show runtime error dialog"""
        try:
            error_msg = f"""
An error occurred while running the application:

{type(error).__name__}: {str(error)}

The application will now close. Please check the log files
for more detailed information.
            """
            messagebox.showerror("Runtime Error", error_msg.strip())

        except Exception as e:
            print(f"Failed to show runtime error: {e}")

    def cleanup(self):
        """Flush the current snapshot to disk"""
        try:
            if self.data_manager:
                self.data_manager.save_data()
                self.logger.info("Data saved successfully")
        except Exception as e:
            self.logger.error(f"Error during cleanup: {e}")


def main():
    """Main entry point"""
    sys.excepthook = handle_exception

    logger = setup_logging()
    logger.info("=" * 50)
    logger.info("Starting w2w")
    logger.info("=" * 50)

    app = W2WApp()
    success = app.run()

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
