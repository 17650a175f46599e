from pathlib import PurePosixPath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CatalogEntry(BaseModel):
    """One installable repository. Read-only once loaded."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    name: str = Field(..., min_length=1, description="Display label")
    repo_id: str = Field(..., alias="repo", description="Repository identifier (owner/name)")
    branch: str = Field(default="main", min_length=1, description="Branch to download")
    folder: str = Field(..., min_length=1, description="Folder under the install root")
    start_file: Optional[str] = Field(
        default=None, alias="startFile", description="File run by the start action"
    )
    start_command: Optional[str] = Field(
        default=None, alias="startCommand", description="Command line run by the start action"
    )

    @field_validator("repo_id")
    @classmethod
    def validate_repo_id(cls, v: str) -> str:
        v = v.strip("/")
        if v.endswith(".git"):
            v = v[:-4]
        parts = v.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError("repo must have the form owner/name")
        return v

    @field_validator("branch", mode="before")
    @classmethod
    def default_branch(cls, v):
        # "branch": null or "" in the catalog means the default branch
        return v or "main"

    @field_validator("folder")
    @classmethod
    def validate_folder(cls, v: str) -> str:
        path = PurePosixPath(v.replace("\\", "/"))
        if path.is_absolute() or ".." in path.parts or str(path) in ("", "."):
            raise ValueError("folder must be a relative path inside the install root")
        return str(path)
