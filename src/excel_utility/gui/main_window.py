import logging
from dataclasses import asdict
from pathlib import Path
from tkinter import *
from tkinter import ttk, filedialog, messagebox
from tkinter.scrolledtext import ScrolledText

from ..core.batch_processor import BatchProcessor, summarize
from ..core.config_manager import ConfigManager
from ..core.errors import FileCountMismatchError, RunAlreadyActiveError, SpreadsheetUnavailableError
from ..core.file_mover import FileMover
from ..core.log_service import apply_log_settings
from ..core.utils import Utils, SUPPORTED_EXTENSIONS
from ..models.data_models import ENGINE_CHOICES, ErrorCategory, Operation

INFO_TEXT = """
EXCEL UTILITY TOOL

CONVERT:
1. Go to the Convert tab.
2. Add CSV, TXT, XLS or XLSX files.
3. Choose the output folder.
4. Click Convert to XLSX. Each file is saved as <name>.xlsx in the output folder.

UNLOCK:
1. Go to the Unlock tab.
2. Add the protected files and type the password.
3. Choose the output folder and click Unlock Files.
   Workbook structure, window and sheet protection are removed and an
   unprotected copy is saved. A wrong password is reported per file.

MOVE FILES:
Moves files matching a name pattern from the source folder into a dated
subfolder of the destination folder. Set "Expected file count" to stop the
move when the number of files found is different.

NOTES:
- Files are processed one at a time in the order listed.
- Cancel stops the run after the current file finishes.
- Retry Failed runs the failed files again, up to the retry attempts setting.
- With "Auto-delete originals" on, a source file is deleted only after it was
  saved successfully.
- Logs are written to the logs folder next to the application, one file per day.
"""


class GuiLogHandler(logging.Handler):
    def __init__(self, text_widget):
        super().__init__()
        self.text_widget = text_widget

    def emit(self, record):
        try:
            msg = self.format(record)
            self.text_widget.insert(END, msg + '\n')
            self.text_widget.see(END)
        except Exception:
            pass


class ExcelUtilityApp:
    """Main application class"""

    def __init__(self, root, base_dir=None):
        try:
            self.root = root
            self.root.title("Excel Utility Tool")
            self.root.geometry("1100x750")

            # Add protocol handler for window close button
            self.root.protocol("WM_DELETE_WINDOW", self.on_closing)

            self.base_dir = Path(base_dir) if base_dir else Utils.get_base_directory()
            logging.debug(f"Base directory: {self.base_dir}")

            self.config_manager = ConfigManager(self.base_dir)
            self.settings = self.config_manager.load_settings()

            self.processor = BatchProcessor(
                self.settings,
                progress_callback=self.on_progress,
                yield_callback=self.root.update,
            )
            self._close_requested = False

            # Retry state for the last convert/unlock run
            self.last_operation = None
            self.last_output_folder = ""
            self.last_password = None
            self.failed_sources = []
            self.retries_used = 0

            self.create_widgets()
            self.update_ui_state()

            logging.info("Excel Utility Tool initialized successfully")

        except Exception as e:
            logging.error(f"Error in ExcelUtilityApp initialization: {str(e)}", exc_info=True)
            raise

    def create_widgets(self):
        """Create main GUI widgets"""
        main_paned = ttk.PanedWindow(self.root, orient=HORIZONTAL)
        main_paned.pack(fill=BOTH, expand=True, padx=10, pady=10)

        left_frame = ttk.Frame(main_paned)
        main_paned.add(left_frame, weight=1)
        right_frame = ttk.Frame(main_paned)
        main_paned.add(right_frame, weight=1)

        notebook = ttk.Notebook(left_frame)
        notebook.pack(fill=BOTH, expand=True)

        self.create_info_tab(notebook)
        self.create_convert_tab(notebook)
        self.create_unlock_tab(notebook)
        self.create_move_tab(notebook)
        self.create_settings_tab(notebook)

        self.create_progress_section(left_frame)
        self.create_log_section(right_frame)
        self.setup_logging()

    def create_info_tab(self, notebook):
        """Create info tab"""
        info_frame = ttk.Frame(notebook)
        notebook.add(info_frame, text="ℹ️ Info")

        text = ScrolledText(info_frame, wrap=WORD, font=("Arial", 10))
        text.pack(fill=BOTH, expand=True, padx=20, pady=20)
        text.insert(END, INFO_TEXT)
        text.config(state=DISABLED)

    def create_file_list(self, parent, title):
        """Create a file list with Add/Remove/Clear buttons, returns the listbox"""
        list_frame = ttk.LabelFrame(parent, text=title, padding=10)
        list_frame.pack(fill=BOTH, expand=True, pady=(0, 10))

        listbox = Listbox(list_frame, selectmode=EXTENDED, height=10)
        listbox.pack(side=LEFT, fill=BOTH, expand=True)
        scrollbar = ttk.Scrollbar(list_frame, orient=VERTICAL, command=listbox.yview)
        scrollbar.pack(side=LEFT, fill=Y)
        listbox.config(yscrollcommand=scrollbar.set)

        button_frame = ttk.Frame(list_frame)
        button_frame.pack(side=LEFT, fill=Y, padx=(10, 0))
        ttk.Button(button_frame, text="Add Files", command=lambda: self.add_files(listbox)).pack(fill=X)
        ttk.Button(button_frame, text="Remove", command=lambda: self.remove_selected(listbox)).pack(fill=X, pady=(5, 0))
        ttk.Button(button_frame, text="Clear", command=lambda: listbox.delete(0, END)).pack(fill=X, pady=(5, 0))
        return listbox

    def create_folder_row(self, parent, row, label, variable):
        ttk.Label(parent, text=label).grid(row=row, column=0, sticky=W, pady=(5, 0))
        ttk.Entry(parent, textvariable=variable, width=50).grid(row=row, column=1, sticky=EW, padx=(10, 10), pady=(5, 0))
        ttk.Button(parent, text="Browse", command=lambda: self.browse_folder(variable)).grid(row=row, column=2, pady=(5, 0))
        parent.grid_columnconfigure(1, weight=1)

    def create_convert_tab(self, notebook):
        """Create convert tab"""
        convert_frame = ttk.Frame(notebook, padding=10)
        notebook.add(convert_frame, text="🔄 Convert")

        self.convert_list = self.create_file_list(convert_frame, "Files to Convert")

        output_frame = ttk.LabelFrame(convert_frame, text="Output", padding=10)
        output_frame.pack(fill=X)
        self.convert_output_var = StringVar(value=self.settings.default_output_path)
        self.create_folder_row(output_frame, 0, "Output Folder:", self.convert_output_var)

        self.convert_button = ttk.Button(convert_frame, text="Convert to XLSX", command=self.start_conversion)
        self.convert_button.pack(pady=15)

    def create_unlock_tab(self, notebook):
        """Create unlock tab"""
        unlock_frame = ttk.Frame(notebook, padding=10)
        notebook.add(unlock_frame, text="🔓 Unlock")

        self.unlock_list = self.create_file_list(unlock_frame, "Files to Unlock")

        options_frame = ttk.LabelFrame(unlock_frame, text="Password & Output", padding=10)
        options_frame.pack(fill=X)
        ttk.Label(options_frame, text="Password:").grid(row=0, column=0, sticky=W)
        self.password_var = StringVar()
        ttk.Entry(options_frame, textvariable=self.password_var, show="*", width=30).grid(row=0, column=1, sticky=W, padx=(10, 10))
        self.unlock_output_var = StringVar(value=self.settings.default_output_path)
        self.create_folder_row(options_frame, 1, "Output Folder:", self.unlock_output_var)

        self.unlock_button = ttk.Button(unlock_frame, text="Unlock Files", command=self.start_unlock)
        self.unlock_button.pack(pady=15)

    def create_move_tab(self, notebook):
        """Create move files tab"""
        move_frame = ttk.Frame(notebook, padding=10)
        notebook.add(move_frame, text="📁 Move Files")

        rules_frame = ttk.LabelFrame(move_frame, text="Move Rule", padding=10)
        rules_frame.pack(fill=X)

        self.move_source_var = StringVar(value=self.settings.move_source_path)
        self.move_destination_var = StringVar(value=self.settings.move_destination_path)
        self.create_folder_row(rules_frame, 0, "Source Folder:", self.move_source_var)
        self.create_folder_row(rules_frame, 1, "Destination Folder:", self.move_destination_var)

        ttk.Label(rules_frame, text="File Pattern:").grid(row=2, column=0, sticky=W, pady=(5, 0))
        self.move_pattern_var = StringVar(value=self.settings.move_pattern)
        ttk.Entry(rules_frame, textvariable=self.move_pattern_var, width=20).grid(row=2, column=1, sticky=W, padx=(10, 10), pady=(5, 0))

        ttk.Label(rules_frame, text="Date Folder Format:").grid(row=3, column=0, sticky=W, pady=(5, 0))
        self.move_date_format_var = StringVar(value=self.settings.move_date_folder_format)
        ttk.Entry(rules_frame, textvariable=self.move_date_format_var, width=20).grid(row=3, column=1, sticky=W, padx=(10, 10), pady=(5, 0))

        ttk.Label(rules_frame, text="Expected File Count (0 = any):").grid(row=4, column=0, sticky=W, pady=(5, 0))
        self.move_expected_var = IntVar(value=self.settings.move_expected_count)
        ttk.Spinbox(rules_frame, from_=0, to=999, textvariable=self.move_expected_var, width=8).grid(row=4, column=1, sticky=W, padx=(10, 10), pady=(5, 0))

        ttk.Label(move_frame, text="Example: pattern 'Report_*.xlsx' with format '%Y-%m' moves into <destination>/2024-05",
                  font=("Arial", 9), foreground="gray").pack(anchor=W, pady=(10, 0))

        self.move_button = ttk.Button(move_frame, text="Move Files", command=self.start_move)
        self.move_button.pack(pady=15)

    def create_settings_tab(self, notebook):
        """Create settings tab"""
        settings_frame = ttk.Frame(notebook, padding=10)
        notebook.add(settings_frame, text="⚙️ Settings")

        paths_frame = ttk.LabelFrame(settings_frame, text="Default Paths", padding=10)
        paths_frame.pack(fill=X, pady=(0, 10))
        self.default_input_var = StringVar(value=self.settings.default_input_path)
        self.default_output_var = StringVar(value=self.settings.default_output_path)
        self.create_folder_row(paths_frame, 0, "Default Input Folder:", self.default_input_var)
        self.create_folder_row(paths_frame, 1, "Default Output Folder:", self.default_output_var)

        options_frame = ttk.LabelFrame(settings_frame, text="Options", padding=10)
        options_frame.pack(fill=X, pady=(0, 10))

        self.remember_paths_var = BooleanVar(value=self.settings.remember_paths)
        self.auto_delete_var = BooleanVar(value=self.settings.auto_delete_originals)
        self.detailed_logs_var = BooleanVar(value=self.settings.show_detailed_logs)
        self.sound_var = BooleanVar(value=self.settings.sound_notifications)
        ttk.Checkbutton(options_frame, text="Remember last used paths", variable=self.remember_paths_var).pack(anchor=W)
        ttk.Checkbutton(options_frame, text="Auto-delete originals after a successful save", variable=self.auto_delete_var).pack(anchor=W)
        ttk.Checkbutton(options_frame, text="Show detailed logs (also mirrors to console)", variable=self.detailed_logs_var).pack(anchor=W)
        ttk.Checkbutton(options_frame, text="Sound notification when a run finishes", variable=self.sound_var).pack(anchor=W)

        numbers_frame = ttk.Frame(options_frame)
        numbers_frame.pack(fill=X, pady=(10, 0))
        ttk.Label(numbers_frame, text="Batch size (0 = no limit):").grid(row=0, column=0, sticky=W)
        self.batch_size_var = IntVar(value=self.settings.batch_size)
        ttk.Spinbox(numbers_frame, from_=0, to=10000, textvariable=self.batch_size_var, width=8).grid(row=0, column=1, sticky=W, padx=(10, 0))
        ttk.Label(numbers_frame, text="Retry attempts:").grid(row=1, column=0, sticky=W, pady=(5, 0))
        self.retry_var = IntVar(value=self.settings.retry_attempts)
        ttk.Spinbox(numbers_frame, from_=0, to=10, textvariable=self.retry_var, width=8).grid(row=1, column=1, sticky=W, padx=(10, 0), pady=(5, 0))
        ttk.Label(numbers_frame, text="Spreadsheet engine:").grid(row=2, column=0, sticky=W, pady=(5, 0))
        self.engine_var = StringVar(value=self.settings.engine)
        ttk.Combobox(numbers_frame, textvariable=self.engine_var, values=ENGINE_CHOICES, state="readonly", width=10).grid(row=2, column=1, sticky=W, padx=(10, 0), pady=(5, 0))

        button_frame = ttk.Frame(settings_frame)
        button_frame.pack(fill=X)
        ttk.Button(button_frame, text="Save Settings", command=self.save_settings).pack(side=LEFT)
        ttk.Button(button_frame, text="Reset to Defaults", command=self.reset_to_defaults).pack(side=LEFT, padx=(10, 0))

    def create_progress_section(self, parent):
        """Create progress section"""
        progress_frame = ttk.LabelFrame(parent, text="Progress", padding=15)
        progress_frame.pack(fill=X, pady=(10, 0))

        self.progress_var = StringVar(value="Ready to process files...")
        ttk.Label(progress_frame, textvariable=self.progress_var).pack(anchor=W)

        self.progress_bar = ttk.Progressbar(progress_frame, mode='determinate')
        self.progress_bar.pack(fill=X, pady=(10, 0))

        button_frame = ttk.Frame(progress_frame)
        button_frame.pack(fill=X, pady=(10, 0))
        self.cancel_button = ttk.Button(button_frame, text="Cancel", command=self.cancel_run)
        self.cancel_button.pack(side=LEFT)
        self.retry_button = ttk.Button(button_frame, text="Retry Failed", command=self.retry_failed)
        self.retry_button.pack(side=LEFT, padx=(10, 0))

    def create_log_section(self, parent):
        """Create log section"""
        log_frame = ttk.LabelFrame(parent, text="Processing Log", padding=15)
        log_frame.pack(fill=BOTH, expand=True)

        self.log_text = ScrolledText(log_frame, height=25, font=("Consolas", 9))
        self.log_text.pack(fill=BOTH, expand=True)

    def setup_logging(self):
        """Setup logging to display in GUI"""
        self.gui_handler = GuiLogHandler(self.log_text)
        self.gui_handler.setLevel(logging.DEBUG if self.settings.show_detailed_logs else logging.INFO)
        formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s', datefmt='%H:%M:%S')
        self.gui_handler.setFormatter(formatter)
        logging.getLogger().addHandler(self.gui_handler)

    def add_files(self, listbox):
        """Browse for input files"""
        patterns = " ".join(f"*{ext}" for ext in SUPPORTED_EXTENSIONS)
        filenames = filedialog.askopenfilenames(
            title="Select Files",
            filetypes=[("Spreadsheet files", patterns), ("All files", "*.*")],
            initialdir=self.settings.default_input_path or str(Path.home()),
        )
        existing = set(listbox.get(0, END))
        for filename in filenames:
            path = str(Path(filename).absolute())
            if path not in existing:
                listbox.insert(END, path)
                existing.add(path)
        if filenames and self.settings.remember_paths:
            self.settings.default_input_path = str(Path(filenames[0]).parent)

    def remove_selected(self, listbox):
        for index in reversed(listbox.curselection()):
            listbox.delete(index)

    def browse_folder(self, variable):
        folder = filedialog.askdirectory(
            title="Select Folder",
            initialdir=variable.get() or str(Path.home()),
        )
        if folder:
            variable.set(folder)

    def update_ui_state(self):
        """Enable or disable buttons depending on whether a run is active"""
        running = self.processor.is_running
        for button in (self.convert_button, self.unlock_button, self.move_button):
            button.config(state=DISABLED if running else NORMAL)
        self.cancel_button.config(state=NORMAL if running else DISABLED)
        can_retry = bool(self.failed_sources) and not running and self.retries_used < self.settings.retry_attempts
        self.retry_button.config(state=NORMAL if can_retry else DISABLED)

    def on_progress(self, completed, total, message):
        self.progress_var.set(message)
        self.progress_bar['value'] = (completed / total * 100) if total else 0

    def start_conversion(self):
        paths = list(self.convert_list.get(0, END))
        self.run_batch(Operation.CONVERT, paths, self.convert_output_var.get())

    def start_unlock(self):
        paths = list(self.unlock_list.get(0, END))
        password = self.password_var.get()
        if not password:
            messagebox.showwarning("Password Required", "Please enter the password used to protect the files.")
            return
        self.run_batch(Operation.UNLOCK, paths, self.unlock_output_var.get(), password)

    def run_batch(self, operation, paths, output_folder, password=None, is_retry=False):
        """Validate the selection and run a batch, then show the summary"""
        if self.processor.is_running:
            messagebox.showwarning("Run In Progress", "A run is already in progress. Wait for it to finish or cancel it.")
            return

        output_folder = Utils.clean_path(output_folder)
        if not paths:
            messagebox.showwarning("No Files", "Please add at least one file.")
            return
        if not output_folder:
            messagebox.showwarning("No Output Folder", "Please select an output folder.")
            return
        batch_size = self.settings.batch_size
        if batch_size and len(paths) > batch_size:
            messagebox.showwarning("Too Many Files",
                                   f"{len(paths)} files selected but the batch size is {batch_size}. "
                                   f"Remove some files or raise the batch size in Settings.")
            return

        self.update_settings_from_ui()
        if not is_retry:
            self.retries_used = 0
        self.last_operation = operation
        self.last_output_folder = output_folder
        self.last_password = password
        self.progress_bar['value'] = 0

        try:
            self.update_ui_state_for_run(True)
            if operation == Operation.CONVERT:
                results = self.processor.run_conversion(paths, output_folder)
            else:
                results = self.processor.run_unlock(paths, output_folder, password)
        except SpreadsheetUnavailableError as e:
            self.progress_var.set("Spreadsheet application unavailable")
            messagebox.showerror("Spreadsheet Application Unavailable", str(e))
            return
        except RunAlreadyActiveError as e:
            messagebox.showwarning("Run In Progress", str(e))
            return
        except Exception as e:
            logging.error(f"Error during {operation.value}: {e}", exc_info=True)
            self.progress_var.set("Processing failed!")
            messagebox.showerror("Error", f"An error occurred during processing: {e}")
            return
        finally:
            self.update_ui_state_for_run(False)

        if self._close_requested:
            self.on_closing()
            return

        summary = summarize(results, self.processor.last_run_cancelled)
        self.failed_sources = summary.failed_sources
        self.show_summary(operation, summary, results)

    def update_ui_state_for_run(self, running):
        if running:
            for button in (self.convert_button, self.unlock_button, self.move_button, self.retry_button):
                button.config(state=DISABLED)
            self.cancel_button.config(state=NORMAL)
        else:
            self.update_ui_state()

    def show_summary(self, operation, summary, results):
        self.progress_var.set(f"{operation.value.capitalize()} complete: {summary.describe()}")
        self.update_ui_state()
        if self.settings.sound_notifications:
            self.root.bell()

        if summary.failed:
            auth_failures = [r for r in results if not r.success and r.error_category == ErrorCategory.AUTHENTICATION]
            detail = "\n".join(Path(p).name for p in summary.failed_sources[:10])
            if len(summary.failed_sources) > 10:
                detail += f"\n... and {len(summary.failed_sources) - 10} more"
            hint = "\n\nSome files rejected the password - re-enter it and retry." if auth_failures else ""
            messagebox.showwarning("Run Finished With Errors",
                                   f"{summary.describe()}.\n\nFailed files:\n{detail}{hint}\n\nSee the log for details.")
        else:
            messagebox.showinfo("Run Finished", f"{summary.describe()}.")

    def cancel_run(self):
        if self.processor.request_cancel():
            self.progress_var.set("Cancelling after the current file...")

    def retry_failed(self):
        """Run the failed files of the last run again"""
        if not self.failed_sources or self.last_operation is None:
            return
        if self.retries_used >= self.settings.retry_attempts:
            messagebox.showinfo("Retry Limit Reached", "The configured number of retry attempts has been used.")
            return
        self.retries_used += 1
        logging.info(f"Retrying {len(self.failed_sources)} failed file(s), attempt {self.retries_used} of {self.settings.retry_attempts}")
        password = self.password_var.get() if self.last_operation == Operation.UNLOCK else None
        self.run_batch(self.last_operation, list(self.failed_sources), self.last_output_folder,
                       password or self.last_password, is_retry=True)

    def start_move(self):
        """Move files according to the move rule"""
        if self.processor.is_running:
            messagebox.showwarning("Run In Progress", "Wait for the current run to finish before moving files.")
            return
        self.update_settings_from_ui()
        if not self.settings.move_source_path or not self.settings.move_destination_path:
            messagebox.showwarning("Missing Folders", "Please select both the source and the destination folder.")
            return

        mover = FileMover.from_settings(self.settings)
        try:
            results = mover.move_files()
        except FileCountMismatchError as e:
            messagebox.showwarning("File Count Check", str(e))
            return
        except Exception as e:
            logging.error(f"Error moving files: {e}")
            messagebox.showerror("Error", f"Could not move files: {e}")
            return

        summary = summarize(results)
        self.progress_var.set(f"Move complete: {summary.describe()}")
        if self.settings.sound_notifications:
            self.root.bell()
        messagebox.showinfo("Move Finished", f"{summary.describe()}.")

    def update_settings_from_ui(self):
        """Copy widget values onto the settings object"""
        try:
            self.settings.default_input_path = Utils.clean_path(self.default_input_var.get())
            self.settings.default_output_path = Utils.clean_path(self.default_output_var.get())
            self.settings.remember_paths = self.remember_paths_var.get()
            self.settings.auto_delete_originals = self.auto_delete_var.get()
            self.settings.show_detailed_logs = self.detailed_logs_var.get()
            self.settings.sound_notifications = self.sound_var.get()
            self.settings.batch_size = max(0, int(self.batch_size_var.get()))
            self.settings.retry_attempts = max(0, int(self.retry_var.get()))
            self.settings.engine = self.engine_var.get()
            self.settings.move_source_path = Utils.clean_path(self.move_source_var.get())
            self.settings.move_destination_path = Utils.clean_path(self.move_destination_var.get())
            self.settings.move_pattern = self.move_pattern_var.get().strip() or "*"
            self.settings.move_date_folder_format = self.move_date_format_var.get().strip()
            self.settings.move_expected_count = max(0, int(self.move_expected_var.get()))
        except (TclError, ValueError) as e:
            logging.warning(f"Invalid value in settings form, keeping previous values: {e}")

        self.gui_handler.setLevel(logging.DEBUG if self.settings.show_detailed_logs else logging.INFO)
        apply_log_settings(self.settings.show_detailed_logs)

    def update_ui_values(self):
        """Copy settings values onto the widgets"""
        self.default_input_var.set(self.settings.default_input_path)
        self.default_output_var.set(self.settings.default_output_path)
        self.remember_paths_var.set(self.settings.remember_paths)
        self.auto_delete_var.set(self.settings.auto_delete_originals)
        self.detailed_logs_var.set(self.settings.show_detailed_logs)
        self.sound_var.set(self.settings.sound_notifications)
        self.batch_size_var.set(self.settings.batch_size)
        self.retry_var.set(self.settings.retry_attempts)
        self.engine_var.set(self.settings.engine)
        self.move_source_var.set(self.settings.move_source_path)
        self.move_destination_var.set(self.settings.move_destination_path)
        self.move_pattern_var.set(self.settings.move_pattern)
        self.move_date_format_var.set(self.settings.move_date_folder_format)
        self.move_expected_var.set(self.settings.move_expected_count)

    def save_settings(self):
        """Save current settings"""
        self.update_settings_from_ui()
        if self.config_manager.save_settings(self.settings):
            messagebox.showinfo("Settings", "Settings saved.")
        else:
            messagebox.showwarning("Settings", "Settings could not be saved. See the log for details.")

    def reset_to_defaults(self):
        """Reset current settings to defaults"""
        defaults = self.config_manager.get_default_settings()
        for key, value in asdict(defaults).items():
            setattr(self.settings, key, value)
        self.update_ui_values()
        logging.info("Settings reset to defaults")

    def on_closing(self):
        """Handle application closing"""
        if self.processor.is_running:
            # The run loop closes the window once the current file finishes
            self._close_requested = True
            self.processor.request_cancel()
            return

        try:
            self.update_settings_from_ui()
            if self.settings.remember_paths:
                output = self.convert_output_var.get() or self.unlock_output_var.get()
                if output:
                    self.settings.default_output_path = Utils.clean_path(output)
                self.config_manager.save_settings(self.settings)

            logging.info("Application closing")
            logging.getLogger().removeHandler(self.gui_handler)
            self.root.destroy()
        except Exception as e:
            logging.error(f"Error during application close: {e}")
            self.root.destroy()
