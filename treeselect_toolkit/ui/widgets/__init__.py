"""Reusable ttk widgets rendering selection engine state.

Widgets are imported from their modules directly so that importing the
package does not require a Tk display.
"""

__all__: list[str] = []
