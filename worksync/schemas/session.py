"""Session Schemas — request/response bodies for sign-in, selection and notices.

Invariants:
    - Entity drafts/patches are NOT redefined here: routes accept core/entities.py
      input models directly, so the HTTP and in-process contracts cannot drift
    - Response bodies use the camelCase keys UI collaborators expect
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from worksync.core.entities import Actor


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionStart(Actor):
    """Actor identity handed over by the authentication flow."""


class CurrentProjectSelect(_CamelModel):
    """Select a project by id, or clear the selection with null."""
    project_id: str | None = Field(default=None, min_length=1)


class NoticeResponse(_CamelModel):
    level: str
    title: str
    message: str = ""
    created_at: str


class NoticeList(_CamelModel):
    notices: list[NoticeResponse]
