"""
Core data models for the DocIngest pipeline.

This module defines the standard data structures that are passed between
stages in the pipeline.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class File:
    """
    A single file discovered inside a document folder.

    Attributes:
        name (str): The file name, including extension.
        path (Path): The absolute path of the file.
        last_modified (datetime): The file's last-modified timestamp.
    """

    name: str
    path: Path
    last_modified: datetime


@dataclass
class ProcessedFile:
    """
    An artifact produced for a document, either generated from a group of
    source files or passed through unchanged.

    Attributes:
        path (Path): Location of the artifact.
        content (Optional[str]): The text the artifact was generated from.
            None for passed-through files.
        category (Optional[str]): Set by categorization. None means the
            artifact was never categorized; "" means categorization failed.
        tags (List[str]): Free-form tags, e.g. "2023/01" from date parsing.
        insights (List[str]): Short observations from categorization.
    """

    path: Path
    content: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)


@dataclass
class Document:
    """
    A logical document: one input subdirectory and everything derived from it.

    Attributes:
        name (str): Display name, the source directory's name.
        path (Path): The source directory.
        created_at (datetime): Creation timestamp of the source directory.
        files (List[File]): Source files in discovery order.
        processed_files (List[ProcessedFile]): Artifacts, append-only.
        content (Optional[str]): Aggregated text of all generated artifacts.
        category, tags, insights: Document-level categorization metadata.
        id (str): A unique identifier for this run.
    """

    name: str
    path: Path
    created_at: datetime
    files: List[File] = field(default_factory=list)
    processed_files: List[ProcessedFile] = field(default_factory=list)
    content: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass
class Categorization:
    """The result of categorizing a piece of text."""

    category: str = ""
    tags: List[str] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)


@dataclass
class DeliveryItem:
    """One document's artifacts and the fragment they are delivered under."""

    document: Document
    fragment: str
    artifact_paths: List[Path]

    @property
    def destination_key(self) -> str:
        return f"{self.fragment}/{self.document.name}"
