from __future__ import annotations

from pydantic import BaseModel, Field


class FetchLibraryDocsInput(BaseModel):
    library: str = Field(min_length=1, max_length=500)
    ecosystem: str | None = Field(default=None, max_length=50)
    max_pages: int = Field(ge=1, le=50)
    skip_cache: bool = False


class FetchLibraryDocsOutput(BaseModel):
    library: str
    seed_url: str
    page_count: int
    content: str


class DetectPackageInput(BaseModel):
    text: str = Field(min_length=1, max_length=10_000)


class DetectPackageOutput(BaseModel):
    detected: bool
    package: str | None = None
    language: str | None = None
    ecosystem: str | None = None
