"""Spreadsheet access for the jaap catalog."""

from .session import GoogleSheetsSession, SheetsSession

__all__ = ["GoogleSheetsSession", "SheetsSession"]
