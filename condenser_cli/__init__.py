"""Timewave Condenser: area-aware repository summaries driven by LLM providers."""

__version__ = "0.3.0"
