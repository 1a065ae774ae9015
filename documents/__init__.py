"""
Documents Module

End-to-end processing of an uploaded health document:
File -> Extraction -> Localized Summary
"""

from .pipeline import DocumentPipeline, DocumentSummary
from .service import router, get_pipeline, ProcessDocumentResponse

__all__ = [
    "DocumentPipeline",
    "DocumentSummary",
    "router",
    "get_pipeline",
    "ProcessDocumentResponse"
]
