"""Discovery, metadata extraction and batch processing."""

from .discovery import MediaScanner
from .extractors import MetadataExtractor, is_media, media_type
from .models import BatchResult, SkippedFile
from .pipeline import RenamePipeline

__all__ = [
    "BatchResult",
    "MediaScanner",
    "MetadataExtractor",
    "RenamePipeline",
    "SkippedFile",
    "is_media",
    "media_type",
]
