"""
Filename-based grouping of a document's files.

Multi-page scans usually arrive as `scan1.png`, `scan2.png`, ... The first run
of digits in a file name is taken as the page number and the rest of the name
(prefix + suffix) as the group key:

    "scan12.png"          -> prefix "scan",     page 12, suffix ".png"
    "invoice_2023-01.pdf" -> prefix "invoice_", page 2023, suffix "-01.pdf"
    "cover.png"           -> prefix "cover.png", page None, suffix ""

Rules:
- Only the FIRST maximal run of ASCII digits counts. Leading zeros are
  ignored for ordering ("p01" and "p1" are both page 1).
- A name without digits is a singleton group keyed by the full name. It never
  merges with a digit-bearing name that strips to the same text
  ("doc.png" and "doc1.png" are separate groups).
- Members of a group are sorted by page number, a missing page counting as 0.
  Equal page numbers keep their discovery order.
- Groups are ordered by the discovery position of their first member.
"""

from dataclasses import dataclass
from pathlib import PurePath
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from ..utils.data_models import File

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff"})
DOCUMENT_EXTENSIONS = frozenset({".pdf", ".docx", ".doc"})

IMAGE = "image"
DOCUMENT = "document"
OTHER = "other"


class FileNameParts(NamedTuple):
    prefix: str
    page: Optional[int]
    suffix: str

    @property
    def group_key(self) -> Tuple[str, bool]:
        # The flag keeps digit-less singletons apart from stripped names.
        return (self.prefix + self.suffix, self.page is not None)

    @property
    def sort_page(self) -> int:
        return self.page if self.page is not None else 0


@dataclass
class FileGroup:
    """A page-ordered set of files sharing one group key."""

    key: str
    files: List[File]

    @property
    def paths(self):
        return [f.path for f in self.files]


def parse_file_name(name: str) -> FileNameParts:
    """
    Splits a file name around its first maximal run of ASCII digits.

    Args:
        name (str): A bare file name.

    Returns:
        FileNameParts: `(prefix, page, suffix)`; `page` is None when the name
            contains no digits, in which case `prefix` is the whole name.
    """
    start = 0
    length = len(name)
    while start < length and not ("0" <= name[start] <= "9"):
        start += 1
    if start == length:
        return FileNameParts(name, None, "")

    end = start
    while end < length and "0" <= name[end] <= "9":
        end += 1
    return FileNameParts(name[:start], int(name[start:end]), name[end:])


def classify_file(name: str) -> str:
    """Returns IMAGE, DOCUMENT or OTHER based on the (case-insensitive) extension."""
    suffix = PurePath(name).suffix.lower()
    if suffix in IMAGE_EXTENSIONS:
        return IMAGE
    if suffix in DOCUMENT_EXTENSIONS:
        return DOCUMENT
    return OTHER


def partition_files(files: Sequence[File]) -> Dict[str, List[File]]:
    """Splits files into the IMAGE, DOCUMENT and OTHER categories, keeping order."""
    partitions: Dict[str, List[File]] = {IMAGE: [], DOCUMENT: [], OTHER: []}
    for f in files:
        partitions[classify_file(f.name)].append(f)
    return partitions


def group_files(files: Sequence[File]) -> List[FileGroup]:
    """
    Groups files by their filename-derived key.

    Args:
        files (Sequence[File]): Files in discovery order.

    Returns:
        List[FileGroup]: Groups in order of first appearance, each with its
            members sorted by page number.
    """
    buckets: Dict[Tuple[str, bool], List[Tuple[int, File]]] = {}
    for f in files:
        parts = parse_file_name(f.name)
        buckets.setdefault(parts.group_key, []).append((parts.sort_page, f))

    groups = []
    for (key, _), members in buckets.items():
        # sorted() is stable, so equal pages keep discovery order
        ordered = [f for _, f in sorted(members, key=lambda m: m[0])]
        groups.append(FileGroup(key=key, files=ordered))
    return groups
