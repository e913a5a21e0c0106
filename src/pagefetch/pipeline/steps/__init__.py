"""Pipeline steps for fetch operations."""

from .convert import ConvertStep
from .extract import ExtractStep
from .fetch import FetchStep
from .format import FormatStep
from .metadata import MetadataStep

__all__ = [
    "ConvertStep",
    "ExtractStep",
    "FetchStep",
    "FormatStep",
    "MetadataStep",
]
