"""Core business logic for yotox - card mutation and the upload pipeline."""

from .card_mutator import build_chapter, mutate_card, readable_file_size
from .upload import UploadOrchestrator, upload_to_card

__all__ = [
    "UploadOrchestrator",
    "upload_to_card",
    "mutate_card",
    "build_chapter",
    "readable_file_size",
]
