# -*- coding: utf-8 -*-

"""
Main entry point for launching the TreeSelect Toolkit demo.
"""

import logging
import tkinter as tk

from treeselect_toolkit.logging_config import setup_logging
from treeselect_toolkit.app import TreeSelectDemo


def main():
    """
    Configure logging, main window, and launch the demo.
    """
    setup_logging()

    root = tk.Tk()
    window_width, window_height = 900, 760
    screen_width = root.winfo_screenwidth()
    screen_height = root.winfo_screenheight()
    pos_x = (screen_width // 2) - (window_width // 2)
    pos_y = (screen_height // 2) - (window_height // 2)
    root.geometry(f"{window_width}x{window_height}+{pos_x}+{pos_y}")

    # Use modern theme if available
    try:
        from sv_ttk import set_theme
        set_theme("light")
    except ImportError:
        print("Warning: 'sv-ttk' theme is not installed.")

    TreeSelectDemo(root)

    root.mainloop()


if __name__ == '__main__':
    main()

    logging.info("===== Application terminated =====")
