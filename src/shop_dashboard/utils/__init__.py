"""Utilities package for the shop dashboard application."""
