"""Pydantic models for refsweep configuration data."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .issues import DEFAULT_ISSUES_FILE


class GitSection(BaseModel):
    """Git configuration.

    Attributes:
        path: Git executable path (default ``git``).

    Example:
        >>> GitSection(path="  ").path
        'git'
    """

    model_config = ConfigDict(extra="allow")

    path: str = "git"

    @field_validator("path", mode="before")
    @classmethod
    def normalize_path(cls, value: object) -> object:
        if value is None:
            return "git"
        if isinstance(value, str):
            normalized = value.strip()
            return normalized or "git"
        return value


class TagSection(BaseModel):
    """Tag retention defaults; CLI and environment values take precedence."""

    model_config = ConfigDict(extra="allow")

    keep: int | None = Field(default=None, ge=0)
    months: int | None = Field(default=None, ge=0)


class SweepConfig(BaseModel):
    """Project configuration read from ``.refsweep.json``.

    Attributes:
        remote: Remote whose branches and tags are cleaned.
        issues_file: Tracker export used by the issue safety check.
        protected_branches: Branch names never deleted, in addition to the
            remote default branch.
        git: Git executable settings.
        tags: Tag retention defaults.

    Example:
        >>> SweepConfig.model_validate({"remote": "upstream"}).protected_branches
        ('test',)
    """

    model_config = ConfigDict(extra="ignore")

    remote: str = "origin"
    issues_file: str = DEFAULT_ISSUES_FILE
    protected_branches: tuple[str, ...] = ("test",)
    git: GitSection = Field(default_factory=GitSection)
    tags: TagSection = Field(default_factory=TagSection)

    @field_validator("remote", "issues_file", mode="before")
    @classmethod
    def require_non_blank(cls, value: object) -> object:
        if isinstance(value, str):
            normalized = value.strip()
            if not normalized:
                raise ValueError("must not be blank")
            return normalized
        return value

    @field_validator("protected_branches", mode="before")
    @classmethod
    def normalize_protected(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            return tuple(
                item.strip() for item in value if isinstance(item, str) and item.strip()
            )
        return value
