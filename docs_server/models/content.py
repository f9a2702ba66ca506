"""Models for remote content, documentation and search results."""

from enum import Enum

from pydantic import BaseModel, Field


class EntryType(str, Enum):
    """Entry type reported by the GitHub contents API."""

    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"
    SUBMODULE = "submodule"


class DirectoryItem(BaseModel):
    """One element of a directory listing."""

    name: str
    path: str = ""
    type: EntryType
    size: int = 0


class FileContent(BaseModel):
    """File descriptor returned for a single path."""

    name: str = ""
    path: str = ""
    type: EntryType
    encoding: str | None = None
    content: str | None = None
    size: int = 0


RemoteEntry = list[DirectoryItem] | FileContent


class Heading(BaseModel):
    """A markdown heading and its derived anchor."""

    level: int = Field(ge=1, le=6)
    title: str
    anchor: str


class DocSet(BaseModel):
    """Documentation files resolved for a library."""

    is_local: bool
    files: list[str] = Field(default_factory=list)
    source_repo: str | None = None


class SearchMatch(BaseModel):
    """A matching line and its surrounding context window."""

    line_number: int = Field(ge=1)
    context: str


class CodeBlock(BaseModel):
    """A fenced code block extracted from markdown."""

    language: str | None = None
    code: str


class FileMatches(BaseModel):
    """Matches found in one file."""

    file: str
    matches: list[str] = Field(default_factory=list)


class DocSearchResult(FileMatches):
    """Documentation search hit with headings that also matched."""

    sections: list[Heading] = Field(default_factory=list)


class TreeNode(BaseModel):
    """Entry in an analyzed repository tree."""

    name: str
    path: str
    type: EntryType
    children: list["TreeNode"] | None = None


class SuggestedPaths(BaseModel):
    """Paths proposed for a new registry entry."""

    src_paths: list[str] = Field(default_factory=list)
    example_paths: list[str] = Field(default_factory=list)
    docs_paths: list[str] = Field(default_factory=list)


class RepositoryAnalysis(BaseModel):
    """Result of a repository structure analysis."""

    structure: list[TreeNode] = Field(default_factory=list)
    file_type_counts: dict[str, int] = Field(default_factory=dict)
    suggested_paths: SuggestedPaths = Field(default_factory=SuggestedPaths)
    main_branch: str


__all__ = [
    "EntryType",
    "DirectoryItem",
    "FileContent",
    "RemoteEntry",
    "Heading",
    "DocSet",
    "SearchMatch",
    "CodeBlock",
    "FileMatches",
    "DocSearchResult",
    "TreeNode",
    "SuggestedPaths",
    "RepositoryAnalysis",
]
