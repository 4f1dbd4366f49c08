# src/forkdiff/definition.py
from pathlib import Path
from typing import Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from forkdiff.errors import ForkDiffError, SchemaViolation


class ForkDefinition(BaseModel):
    """A named section of the report and the files its globs claim."""

    # Unknown keys are almost always typos, e.g. 'glob' for 'globs'
    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str
    description: str = ""
    globs: Tuple[str, ...] = ()
    sub: Tuple["ForkDefinition", ...] = ()

    @field_validator("description", mode="before")
    @classmethod
    def _empty_description(cls, value):
        return "" if value is None else value

    @field_validator("globs", "sub", mode="before")
    @classmethod
    def _empty_sequence(cls, value):
        return () if value is None else value


class Project(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = ""
    url: str = ""
    ref: str = ""


class Page(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    title: str
    footer: str = ""
    base: Optional[Project] = None
    fork: Optional[Project] = None
    definition: ForkDefinition = Field(alias="def")
    ignore: Tuple[str, ...] = ()

    @field_validator("ignore", mode="before")
    @classmethod
    def _empty_ignore(cls, value):
        return () if value is None else value


def _format_validation_error(err: ValidationError) -> str:
    problems = []
    for e in err.errors():
        location = ".".join(str(part) for part in e["loc"]) or "<root>"
        problems.append(f"{location}: {e['msg']}")
    return "; ".join(problems)


def parse_page(data) -> Page:
    """Validates already-decoded YAML data against the page schema."""
    if not isinstance(data, dict):
        raise SchemaViolation("Page definition must be a mapping at the top level")
    try:
        return Page.model_validate(data)
    except ValidationError as e:
        raise SchemaViolation(f"Invalid page definition: {_format_validation_error(e)}") from e


def load_page(path: Path) -> Page:
    """Reads and strictly validates a fork page definition (fork.yaml)."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ForkDiffError(f"Failed to read page definition '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise SchemaViolation(f"Failed to decode page definition '{path}': {e}") from e
    return parse_page(data)
