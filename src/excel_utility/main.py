import sys
import logging
from tkinter import Tk

from .core.config_manager import ConfigManager
from .core.log_service import apply_log_settings, setup_logging
from .core.utils import Utils


def handle_exception(exc_type, exc_value, exc_traceback):
    """Log uncaught exceptions instead of crashing the application"""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    if issubclass(exc_type, RecursionError):
        logging.error("Recursion error detected. Application will exit.")
    else:
        logging.error(f"An unexpected error occurred: {exc_value}", exc_info=(exc_type, exc_value, exc_traceback))


def main():
    """Main application entry point"""
    base_dir = Utils.get_base_directory()

    # File logging starts first so settings load warnings reach the log file
    setup_logging(base_dir, mirror_to_console=False)
    settings = ConfigManager(base_dir).load_settings()
    apply_log_settings(settings.show_detailed_logs)

    sys.excepthook = handle_exception

    try:
        # Create root window
        root = Tk()
        root.withdraw()  # Hide the root window initially

        # Setup tkinter exception handler
        root.report_callback_exception = handle_exception

        from .gui.main_window import ExcelUtilityApp
        ExcelUtilityApp(root, base_dir)
        root.update_idletasks()
        root.deiconify()  # Show the window
        root.mainloop()

    except Exception as e:
        logging.error(f"Failed to start application: {str(e)}")
        raise


if __name__ == "__main__":
    main()
