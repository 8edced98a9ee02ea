from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, TypeAdapter


class Project(BaseModel):
    """
    A Sentry project as returned by the organization projects endpoint.

    Attributes:
        id: Opaque project identifier, compared as an exact string
        slug: Short URL-safe project name
    """
    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    id: str
    slug: str


project_list_adapter: TypeAdapter[List[Project]] = TypeAdapter(List[Project])
