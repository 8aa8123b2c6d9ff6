"""Scraper package: fetch strategies, normalisation and structured extraction."""

from toolshelf.scraper.models import ExtractedToolRecord, RawPageContent
from toolshelf.scraper.normalizer import normalize
from toolshelf.scraper.pipeline import ExtractionPipeline, build_default_pipeline, find_logo

__all__ = [
    "ExtractionPipeline",
    "ExtractedToolRecord",
    "RawPageContent",
    "build_default_pipeline",
    "find_logo",
    "normalize",
]
