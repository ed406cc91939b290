"""
FileSender - Tkinter window
"""

import tkinter as tk
from tkinter import ttk, filedialog

from .config import APP_TITLE
from .errors import DownloadIndexInvalid
from .mailbox import set_offered_note
from .utils import display_name


class FileSenderWindow:
    """Display for the shared Session.

    All widgets belong to the tkinter thread; server-side changes arrive as
    closures through the bridge, after which ``refresh`` redraws from the
    Session.
    """

    def __init__(self, session, bridge, address: str):
        self.session = session
        self.bridge = bridge

        self.root = tk.Tk()
        self.root.title(APP_TITLE)
        self.root.geometry("640x520")
        self.root.minsize(480, 400)

        self.address_var = tk.StringVar(value=address)
        self.upload_var = tk.StringVar(value="")
        self._received_shown = None

        self._setup_ui()
        self.refresh()
        self.bridge.add_listener(self.refresh)
        self.bridge.attach(self.root)

    def _setup_ui(self):
        main_frame = ttk.Frame(self.root, padding=10)
        main_frame.pack(fill=tk.BOTH, expand=True)
        main_frame.columnconfigure(0, weight=1)
        main_frame.columnconfigure(1, weight=1)
        main_frame.rowconfigure(3, weight=1)
        main_frame.rowconfigure(5, weight=1)

        # Address to share with the peer
        ttk.Label(main_frame, text="Address").grid(row=0, column=0, sticky='w')
        address_entry = ttk.Entry(main_frame, textvariable=self.address_var, state='readonly')
        address_entry.grid(row=1, column=0, columnspan=2, sticky='ew', pady=(0, 10))

        # Notes
        ttk.Label(main_frame, text="Text for download").grid(row=2, column=0, sticky='w')
        ttk.Label(main_frame, text="Uploaded text").grid(row=2, column=1, sticky='w')

        self.offered_text = tk.Text(main_frame, height=8, wrap='word')
        self.offered_text.grid(row=3, column=0, sticky='nsew', padx=(0, 5))
        self.offered_text.bind('<<Modified>>', self._on_offered_modified)

        self.received_text = tk.Text(main_frame, height=8, wrap='word', state='disabled')
        self.received_text.grid(row=3, column=1, sticky='nsew', padx=(5, 0))

        # Downloads
        header = ttk.Frame(main_frame)
        header.grid(row=4, column=0, columnspan=2, sticky='ew', pady=(10, 0))
        ttk.Label(header, text="Files for download").pack(side=tk.LEFT)
        ttk.Button(header, text="Add files", command=self._add_files).pack(side=tk.RIGHT)

        self.download_list = tk.Listbox(main_frame, activestyle='none')
        self.download_list.grid(row=5, column=0, columnspan=2, sticky='nsew')
        self.download_list.bind('<Delete>', lambda e: self._remove_selected())
        self.download_list.bind('<Button-3>', self._show_menu)

        self.download_menu = tk.Menu(self.root, tearoff=0)
        self.download_menu.add_command(label="Remove", command=self._remove_selected)

        # Last upload and quit
        bottom = ttk.Frame(main_frame)
        bottom.grid(row=6, column=0, columnspan=2, sticky='ew', pady=(10, 0))
        ttk.Label(bottom, text="Uploaded file:").pack(side=tk.LEFT)
        ttk.Entry(bottom, textvariable=self.upload_var, state='readonly').pack(
            side=tk.LEFT, fill=tk.X, expand=True, padx=5)
        ttk.Button(bottom, text="Quit", command=self.root.quit).pack(side=tk.RIGHT)

    def _on_offered_modified(self, event):
        if not self.offered_text.edit_modified():
            return
        set_offered_note(self.session, self.offered_text.get('1.0', 'end-1c'))
        self.offered_text.edit_modified(False)

    def _add_files(self):
        paths = filedialog.askopenfilenames(title="Select files to offer")
        if not paths:
            return
        self.session.add_downloads(paths)
        for path in paths:
            self.download_list.insert(tk.END, display_name(path))

    def _remove_selected(self):
        selection = self.download_list.curselection()
        if not selection:
            return
        index = selection[0]
        try:
            self.session.remove_download(index)
        except DownloadIndexInvalid:
            return
        self.download_list.delete(index)

    def _show_menu(self, event):
        index = self.download_list.nearest(event.y)
        self.download_list.selection_clear(0, tk.END)
        self.download_list.selection_set(index)
        self.download_menu.tk_popup(event.x_root, event.y_root)

    def refresh(self):
        """Redraw the server-owned fields from the Session."""
        received = self.session.received_note
        if received != self._received_shown:
            self.received_text.configure(state='normal')
            self.received_text.delete('1.0', tk.END)
            self.received_text.insert('1.0', received)
            self.received_text.configure(state='disabled')
            self._received_shown = received

        last = self.session.last_upload
        if last is None:
            self.upload_var.set("")
        elif last.truncated:
            self.upload_var.set("Truncated")
        else:
            self.upload_var.set(f"{last.filename or 'unknown file'} ({last.received_at})")

    def run(self):
        self.root.protocol("WM_DELETE_WINDOW", self.root.quit)
        self.root.mainloop()
        self.root.destroy()


def run_window(session, bridge, address: str) -> None:
    FileSenderWindow(session, bridge, address).run()
