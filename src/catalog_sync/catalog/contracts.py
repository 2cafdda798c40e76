"""
Data contracts for the alias table and exemption list files.

These Pydantic models define the on-disk JSON structure of the two
hand-maintained configuration tables.
"""

from pydantic import BaseModel, Field, field_validator


class AliasEntry(BaseModel):
    """One title known under different names in the two catalogs."""

    source_title: str = Field(..., min_length=1, description="Title as listed in the source catalog")
    target_title: str = Field(..., min_length=1, description="Title as listed in the target catalog")
    note: str | None = Field(default=None, description="Why the alias exists")

    @field_validator("source_title", "target_title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        """Reject titles that are only whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Title must not be blank")
        return v


class OverrideEntry(BaseModel):
    """A target title that must never be reported for removal."""

    target_title: str = Field(..., min_length=1, description="Title as listed in the target catalog")
    reason: str | None = Field(default=None, description="Why the title is kept")

    @field_validator("target_title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        """Reject titles that are only whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Title must not be blank")
        return v


class AliasTableFile(BaseModel):
    """Top-level structure of the alias table file."""

    version: str = Field(default="1.0")
    mappings: list[AliasEntry] = Field(default_factory=list)


class ExemptionListFile(BaseModel):
    """Top-level structure of the exemption list file."""

    version: str = Field(default="1.0")
    additions: list[OverrideEntry] = Field(default_factory=list)
