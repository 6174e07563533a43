"""UI package - customtkinter windows, tabs and frames for Shop Dashboard."""
