"""Issue model and hierarchical ID helpers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

ID_SEPARATOR = "."


def first_separator_prefix(issue_id: str) -> str | None:
    """Return the text before the first separator, or None for a root ID.

    `bd-abc123.1` -> `bd-abc123`, and `bd-abc123.1.1` -> `bd-abc123` as well:
    only the root-level prefix is resolved, never the immediate parent of a
    multi-level ID.
    """

    head, sep, _ = issue_id.partition(ID_SEPARATOR)
    if not sep:
        return None
    return head


class Issue(BaseModel):
    """A persisted issue row.

    The parent of a child issue is encoded in its ID (`<parent>.<suffix>`);
    there is no parent column.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    status: str = Field(default="open")
    ephemeral: bool = Field(default=False)
    pinned: bool = Field(default=False)
    wisp_type: str | None = Field(default=None)

    @property
    def is_child(self) -> bool:
        return ID_SEPARATOR in self.id

    @property
    def root_id(self) -> str:
        """ID of the root ancestor (the issue itself for a root issue)."""

        return first_separator_prefix(self.id) or self.id
