"""
Services module for application-level helpers.
"""

from fincalc.services.summaries import summarize_buyd, summarize_debt, summarize_property

__all__ = ["summarize_buyd", "summarize_debt", "summarize_property"]
