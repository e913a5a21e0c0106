"""Pipeline architecture for pagefetch."""

from .base import EventEmitter, FetchPipeline, PageContext
from .base import FetchStep as FetchStepProtocol

__all__ = ["EventEmitter", "FetchPipeline", "FetchStepProtocol", "PageContext"]
