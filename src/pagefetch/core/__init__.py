"""Core fetch API for pagefetch."""

from .fetcher import Fetcher, fetch_blocking
from .report import render_batch_report

__all__ = ["Fetcher", "fetch_blocking", "render_batch_report"]
