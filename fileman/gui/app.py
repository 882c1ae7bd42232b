"""customtkinter shell: directory tree, listing table, details, toolbar.

The window only renders ``BrowserSession`` state and forwards user picks and
file operations to it. ``_pump`` runs on the Tk event loop, so every listing
result is applied on the interactive thread.
"""

from __future__ import annotations

import logging
import tkinter as tk
from tkinter import messagebox, ttk

import customtkinter as ctk

from ..errors import FileManagerError
from ..file_model import EntryKind, PathEntry
from ..file_ops import FileOpResult
from ..launcher import EDIT, OPEN, PRINT
from ..listing_table import COLUMNS, ListingTable
from ..presentation import DefaultPresentationProvider
from ..runtime import config
from ..runtime.session import BrowserSession
from ..tree_model import NodeRef

logger = logging.getLogger(__name__)

APP_TITLE = "FileMan"
PUMP_INTERVAL_MS = 40
PLACEHOLDER_SUFFIX = ":placeholder"
ICON_GLYPHS = {
    "folder": "\U0001F4C1",
    "file": "\U0001F4C4",
    "link": "\U0001F517",
    "drive": "\U0001F4BD",
    "missing": "?",
}


class NewEntryDialog(ctk.CTkToplevel):
    """Modal name + kind prompt; ``result`` is ``(name, kind)`` or ``None``."""

    def __init__(self, master: tk.Misc) -> None:
        super().__init__(master)
        self.title("Create File")
        self.result: tuple[str, EntryKind] | None = None
        self.kind_var = ctk.StringVar(value=EntryKind.FILE.value)

        ctk.CTkLabel(self, text="Name").grid(row=0, column=0, padx=(12, 6), pady=(12, 6), sticky="w")
        self.name_entry = ctk.CTkEntry(self, width=240)
        self.name_entry.grid(row=0, column=1, columnspan=2, padx=(0, 12), pady=(12, 6), sticky="ew")
        ctk.CTkRadioButton(self, text="File", variable=self.kind_var, value=EntryKind.FILE.value).grid(
            row=1, column=1, padx=(0, 6), pady=6, sticky="w"
        )
        ctk.CTkRadioButton(self, text="Directory", variable=self.kind_var, value=EntryKind.DIRECTORY.value).grid(
            row=1, column=2, padx=(0, 12), pady=6, sticky="w"
        )
        ctk.CTkButton(self, text="OK", width=90, command=self._on_ok).grid(row=2, column=1, pady=(6, 12))
        ctk.CTkButton(self, text="Cancel", width=90, command=self.destroy).grid(row=2, column=2, pady=(6, 12))

        self.name_entry.bind("<Return>", lambda _event: self._on_ok())
        self.bind("<Escape>", lambda _event: self.destroy())
        self.transient(master)
        self.after(50, self._grab)

    def _grab(self) -> None:
        self.grab_set()
        self.name_entry.focus_set()

    def _on_ok(self) -> None:
        self.result = (self.name_entry.get(), EntryKind(self.kind_var.get()))
        self.destroy()


class FileManagerApp(ctk.CTk):
    def __init__(self, session: BrowserSession) -> None:
        super().__init__()
        self.session = session
        self.title(APP_TITLE)
        self.geometry("1200x760")
        self.protocol("WM_DELETE_WINDOW", self._on_close)
        self._sort_state: tuple[int, bool] | None = None

        self._setup_layout()
        self._setup_toolbar()
        self._setup_body()
        self._setup_details()
        self._setup_status_bar()

        session.tree.add_listener(self._on_tree_changed)
        session.table.add_listener(self._on_table_loaded)
        session.coordinator.add_listener(self._on_selection_changed)

        self._sync_tree_item(session.tree.FOREST_ROOT)
        roots = session.tree.roots()
        for root in roots:
            self.tree_view.item(str(root), open=True)
        if roots:
            self.tree_view.selection_set(str(roots[0]))
        self.after(PUMP_INTERVAL_MS, self._pump)

    # Layout
    def _setup_layout(self) -> None:
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

    def _setup_toolbar(self) -> None:
        self.toolbar = ctk.CTkFrame(self, corner_radius=0)
        self.toolbar.grid(row=0, column=0, sticky="ew")
        launcher = self.session.launcher
        buttons = (
            ("Open", lambda: self._launch(OPEN), launcher.is_supported(OPEN)),
            ("Edit", lambda: self._launch(EDIT), launcher.is_supported(EDIT)),
            ("Print", lambda: self._launch(PRINT), launcher.is_supported(PRINT)),
            ("New", self.new_entry, True),
            ("Copy", self.copy_file, True),
            ("Rename", self.rename_file, True),
            ("Delete", self.delete_file, True),
        )
        for column, (label, command, enabled) in enumerate(buttons):
            button = ctk.CTkButton(
                self.toolbar,
                text=label,
                width=80,
                command=command,
                state="normal" if enabled else "disabled",
            )
            button.grid(row=0, column=column, padx=(8 if column == 0 else 0, 6), pady=8)

    def _setup_body(self) -> None:
        self.splitter = tk.PanedWindow(self, orient=tk.HORIZONTAL, sashwidth=6, bd=0)
        self.splitter.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        tree_holder = ctk.CTkFrame(self.splitter)
        tree_holder.grid_rowconfigure(0, weight=1)
        tree_holder.grid_columnconfigure(0, weight=1)
        self.tree_view = ttk.Treeview(tree_holder, show="tree", selectmode="browse")
        tree_scroll = ttk.Scrollbar(tree_holder, orient="vertical", command=self.tree_view.yview)
        self.tree_view.configure(yscrollcommand=tree_scroll.set)
        self.tree_view.grid(row=0, column=0, sticky="nsew")
        tree_scroll.grid(row=0, column=1, sticky="ns")
        self.tree_view.bind("<<TreeviewOpen>>", self._on_tree_open)
        self.tree_view.bind("<<TreeviewSelect>>", self._on_tree_select)

        self.detail_panel = ctk.CTkFrame(self.splitter)
        self.detail_panel.grid_rowconfigure(0, weight=1)
        self.detail_panel.grid_columnconfigure(0, weight=1)

        table_holder = ctk.CTkFrame(self.detail_panel, fg_color="transparent")
        table_holder.grid(row=0, column=0, sticky="nsew")
        table_holder.grid_rowconfigure(0, weight=1)
        table_holder.grid_columnconfigure(0, weight=1)
        keys = tuple(column.key for column in COLUMNS)
        self.table_view = ttk.Treeview(table_holder, columns=keys, show="headings", selectmode="browse")
        for index, column in enumerate(COLUMNS):
            self.table_view.heading(column.key, text=column.title, command=lambda i=index: self._sort_by(i))
            width = 260 if column.key == "path" else (160 if column.key in ("name", "modified") else 48)
            self.table_view.column(column.key, width=width, anchor="w" if column.value_type is str else "center")
        table_scroll = ttk.Scrollbar(table_holder, orient="vertical", command=self.table_view.yview)
        self.table_view.configure(yscrollcommand=table_scroll.set)
        self.table_view.grid(row=0, column=0, sticky="nsew")
        table_scroll.grid(row=0, column=1, sticky="ns")
        self.table_view.bind("<<TreeviewSelect>>", self._on_table_select)
        self.table_view.bind("<Double-1>", lambda _event: self._launch(OPEN))

        self.splitter.add(tree_holder, minsize=200, stretch="always")
        self.splitter.add(self.detail_panel, minsize=420, stretch="always")
        self.after(120, self._restore_splitter_position)

    def _setup_details(self) -> None:
        details = ctk.CTkFrame(self.detail_panel)
        details.grid(row=1, column=0, sticky="ew", pady=(8, 0))
        details.grid_columnconfigure(1, weight=1)

        self.name_var = ctk.StringVar()
        self.path_var = ctk.StringVar()
        self.modified_var = ctk.StringVar()
        self.size_var = ctk.StringVar()
        rows = (
            ("File", self.name_var),
            ("Path/name", self.path_var),
            ("Last Modified", self.modified_var),
            ("File size", self.size_var),
        )
        for row, (label, variable) in enumerate(rows):
            ctk.CTkLabel(details, text=label).grid(row=row, column=0, padx=(10, 8), sticky="w")
            ctk.CTkLabel(details, textvariable=variable, anchor="w").grid(row=row, column=1, sticky="ew")

        flags = ctk.CTkFrame(details, fg_color="transparent")
        flags.grid(row=len(rows), column=0, columnspan=2, sticky="w", padx=10, pady=(4, 8))
        self.flag_vars: dict[str, ctk.BooleanVar] = {}
        for column, (key, label) in enumerate(
            (("read", "Read"), ("write", "Write"), ("execute", "Execute"), ("directory", "Directory"), ("file", "File"))
        ):
            variable = ctk.BooleanVar(value=False)
            ctk.CTkCheckBox(flags, text=label, variable=variable, state="disabled").grid(row=0, column=column, padx=(0, 10))
            self.flag_vars[key] = variable

    def _setup_status_bar(self) -> None:
        status_row = ctk.CTkFrame(self, fg_color="transparent")
        status_row.grid(row=2, column=0, sticky="ew", padx=8, pady=(0, 8))
        status_row.grid_columnconfigure(0, weight=1)
        self.status_var = ctk.StringVar(value="")
        ctk.CTkLabel(status_row, textvariable=self.status_var, anchor="w").grid(row=0, column=0, sticky="ew")
        self.progress = ctk.CTkProgressBar(status_row, mode="indeterminate", width=160)
        self._progress_visible = False

    def _restore_splitter_position(self) -> None:
        percent = config.load_left_pane_percent()
        if percent is None:
            return
        width = self.splitter.winfo_width()
        if width > 1:
            self.splitter.sash_place(0, int(width * percent / 100.0), 0)

    def _on_close(self) -> None:
        try:
            config.save_left_pane_percent(self.splitter.winfo_width(), self.splitter.sash_coord(0)[0])
        except tk.TclError:
            pass
        self.session.close()
        self.destroy()

    # Background results
    def _pump(self) -> None:
        try:
            self.session.pump()
        finally:
            self._show_progress(self.session.busy)
            self.after(PUMP_INTERVAL_MS, self._pump)

    def _show_progress(self, busy: bool) -> None:
        if busy and not self._progress_visible:
            self.progress.grid(row=0, column=1, padx=(8, 0))
            self.progress.start()
        elif not busy and self._progress_visible:
            self.progress.stop()
            self.progress.grid_remove()
        self._progress_visible = busy

    # Tree pane
    def _tree_label(self, entry: PathEntry) -> str:
        presentation = self.session.presentation
        glyph = ICON_GLYPHS.get(presentation.icon_for(entry.path), "")
        return f"{glyph} {presentation.display_name_for(entry.path)}".strip()

    def _sync_tree_item(self, ref: NodeRef) -> None:
        """Bring the Treeview children of ``ref`` in line with the model."""
        tree = self.session.tree
        if not tree.is_alive(ref):
            return
        item = "" if ref == tree.FOREST_ROOT else str(ref)
        if item and not self.tree_view.exists(item):
            return
        wanted = [str(child) for child in tree.children(ref)]
        wanted_set = set(wanted)
        for existing in self.tree_view.get_children(item):
            if existing not in wanted_set:
                self.tree_view.delete(existing)
        for index, child_item in enumerate(wanted):
            child_ref = int(child_item)
            if not self.tree_view.exists(child_item):
                self.tree_view.insert(item, index, iid=child_item, text=self._tree_label(tree.entry(child_ref)))
                if tree.children(child_ref):
                    self._sync_tree_item(child_ref)
                elif not tree.is_loaded(child_ref):
                    self.tree_view.insert(child_item, "end", iid=child_item + PLACEHOLDER_SUFFIX, text="")
            else:
                self.tree_view.move(child_item, item, index)

    def _on_tree_changed(self, ref: NodeRef) -> None:
        placeholder = str(ref) + PLACEHOLDER_SUFFIX
        if self.tree_view.exists(placeholder):
            self.tree_view.delete(placeholder)
        self._sync_tree_item(ref)

    def _selected_tree_ref(self) -> NodeRef | None:
        selection = self.tree_view.selection()
        if not selection or selection[0].endswith(PLACEHOLDER_SUFFIX):
            return None
        ref = int(selection[0])
        return ref if self.session.tree.is_alive(ref) else None

    def _on_tree_open(self, _event: tk.Event) -> None:
        item = self.tree_view.focus()
        if item and not item.endswith(PLACEHOLDER_SUFFIX) and self.session.tree.is_alive(int(item)):
            self.session.expand(int(item))

    def _on_tree_select(self, _event: tk.Event) -> None:
        ref = self._selected_tree_ref()
        if ref is not None:
            self.session.select_from_tree(ref)

    # Table pane
    def _on_table_loaded(self, table: ListingTable) -> None:
        self.table_view.delete(*self.table_view.get_children())
        for row in range(table.row_count()):
            values = list(table.row_values(row))
            values[0] = ICON_GLYPHS.get(str(values[0]), "")
            values[4] = table.entry_at(row).last_modified.strftime("%Y-%m-%d %H:%M")
            self.table_view.insert("", "end", iid=str(row), values=values)
        if self._sort_state is not None:
            self._apply_sort(*self._sort_state)
        directory = table.directory
        self.status_var.set(f"{table.row_count()} items in {directory}" if directory else "")

    def _sort_by(self, column: int) -> None:
        descending = self._sort_state == (column, False)
        self._sort_state = (column, descending)
        self._apply_sort(column, descending)

    def _apply_sort(self, column: int, descending: bool) -> None:
        for index, row in enumerate(self.session.table.sorted_rows(column, descending)):
            self.table_view.move(str(row), "", index)

    def _on_table_select(self, _event: tk.Event) -> None:
        selection = self.table_view.selection()
        if not selection:
            return
        try:
            self.session.select_from_table(int(selection[0]))
        except IndexError:
            logger.debug("ignoring stale table row %s", selection[0])

    # Details
    def _on_selection_changed(self, entry: PathEntry | None) -> None:
        if entry is None:
            return
        self.name_var.set(self.session.presentation.display_name_for(entry.path))
        self.path_var.set(str(entry.path))
        self.modified_var.set(entry.last_modified.strftime("%Y-%m-%d %H:%M:%S"))
        self.size_var.set(f"{entry.size_bytes} bytes")
        self.flag_vars["read"].set(entry.can_read)
        self.flag_vars["write"].set(entry.can_write)
        self.flag_vars["execute"].set(entry.can_execute)
        self.flag_vars["directory"].set(entry.is_directory)
        self.flag_vars["file"].set(entry.is_regular_file)
        self.title(f"{APP_TITLE} :: {self.session.presentation.display_name_for(entry.path)}")

    # Actions
    def _show_error(self, error: FileManagerError) -> None:
        messagebox.showerror(error.title, str(error), parent=self)

    def _report(self, result: FileOpResult) -> None:
        if result.error is not None:
            self._show_error(result.error)

    def _launch(self, action: str) -> None:
        message = self.session.launch_current(action)
        if message is not None:
            messagebox.showerror(action.capitalize(), message, parent=self)

    def rename_file(self) -> None:
        if self.session.current is None:
            self._report(self.session.rename(None, ""))
            return
        new_name = ctk.CTkInputDialog(text="New Name", title="Rename").get_input()
        if new_name is not None:
            self._report(self.session.rename(None, new_name))

    def delete_file(self) -> None:
        if self.session.current is None:
            self._report(self.session.delete())
            return
        if messagebox.askokcancel("Delete File", "Are you sure you want to delete this file?", parent=self):
            self._report(self.session.delete())

    def new_entry(self) -> None:
        if self.session.current is None:
            self._report(self.session.create_entry(None, "", EntryKind.FILE))
            return
        dialog = NewEntryDialog(self)
        self.wait_window(dialog)
        if dialog.result is not None:
            name, kind = dialog.result
            result = self.session.create_entry(None, name, kind)
            self._report(result)
            if result.ok and result.hidden:
                self.status_var.set(f"Created {result.path}; hidden entries are not shown")

    def copy_file(self) -> None:
        if self.session.current is None:
            self._report(self.session.copy(None, ""))
            return
        new_name = ctk.CTkInputDialog(text="Copy to name", title="Copy").get_input()
        if new_name is not None:
            self._report(self.session.copy(None, new_name))


def run_app(roots=None, show_hidden: bool = False, max_workers: int = 4) -> None:
    """Create a session for ``roots`` and run the window until closed."""
    ctk.set_appearance_mode("System")
    session = BrowserSession(
        DefaultPresentationProvider(roots),
        show_hidden=show_hidden,
        max_workers=max_workers,
    )
    app = FileManagerApp(session)
    app.mainloop()
