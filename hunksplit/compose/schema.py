"""Wire models for classifier output.

The classifier returns JSON shaped like:

    {"groups": [{"number": 1, "description": "...",
                 "hunks": [{"file": "src/auth.ts", "hunkIndex": 0}],
                 "commitMessage": "...", "commitBody": "..."}],
     "summary": "..."}

Both camelCase and snake_case field names are accepted.
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ClassifierHunkRef(BaseModel):
    """One hunk reference as sent by the classifier."""

    model_config = ConfigDict(populate_by_name=True)

    file: str = Field(min_length=1)
    hunk_index: int = Field(ge=0, validation_alias=AliasChoices("hunkIndex", "hunk_index"))


class ClassifierGroup(BaseModel):
    """A proposed commit group."""

    model_config = ConfigDict(populate_by_name=True)

    number: int = Field(ge=1)
    description: str = ""
    hunks: list[Any] = []  # Validated one by one by the resolver
    commit_message: str = Field(
        min_length=1, validation_alias=AliasChoices("commitMessage", "commit_message")
    )
    commit_body: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("commitBody", "commit_body")
    )

    @field_validator("commit_message", mode="before")
    @classmethod
    def strip_commit_message(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("commit_body", mode="before")
    @classmethod
    def blank_body_is_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value


class ClassifierResponse(BaseModel):
    """The full classifier response."""

    groups: list[Any]  # Validated one by one by the resolver
    summary: Optional[str] = None
