"""
User interface functions
"""

import os
import tkinter as tk
from tkinter import filedialog

from .config import FILE_DIALOG_TYPES


def select_statement_file() -> str:
    """
    Open a file dialog to let the user select one CMI statement.

    Returns:
        Selected file path (empty if cancelled)
    """
    root = tk.Tk()
    root.withdraw()

    file_path = filedialog.askopenfilename(
        parent=root,
        title="Select a CMI Statement",
        filetypes=FILE_DIALOG_TYPES,
        initialdir=os.path.expanduser("~/Downloads"),
    )
    root.destroy()

    return file_path
