"""Type definitions for the AO network client.

Pydantic models for compute unit responses. Field aliases follow the
capitalised keys used on the wire (``Messages``, ``Output``, ``Tags``...).
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _stringify(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


class SortOrder(str, Enum):
    """Ordering for historical results."""

    ASC = "ASC"
    DESC = "DESC"


class Tag(BaseModel):
    """A name/value pair attached to a message or query."""

    name: str
    value: str

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Any:
        return _stringify(value)


class Message(BaseModel):
    """An outbound message emitted by a process while handling an input."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    tags: list[Tag] = Field(default_factory=list, alias="Tags")
    data: str | None = Field(default=None, alias="Data")
    target: str | None = Field(default=None, alias="Target")
    anchor: str | None = Field(default=None, alias="Anchor")

    @field_validator("data", mode="before")
    @classmethod
    def _coerce_data(cls, value: Any) -> Any:
        return _stringify(value)

    def get_tag(self, name: str) -> str | None:
        """Return the value of the first tag called ``name``.

        Duplicate tags are allowed on the wire; only the first is read.
        """
        for tag in self.tags:
            if tag.name == name:
                return tag.value
        return None

    @property
    def action(self) -> str | None:
        return self.get_tag("Action")


class ResultPayload(BaseModel):
    """Outcome of evaluating one message (dry-run, result, or results node)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    messages: list[Message] = Field(default_factory=list, alias="Messages")
    spawns: list[dict[str, Any]] = Field(default_factory=list, alias="Spawns")
    output: Any = Field(default=None, alias="Output")
    error: Any = Field(default=None, alias="Error")
    gas_used: Any = Field(default=None, alias="GasUsed")

    @field_validator("messages", "spawns", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def output_text(self) -> str:
        """Printable output, unwrapping the ``{"data": ...}`` envelope.

        Returns an empty string when the process produced no output.
        """
        output = self.output
        if isinstance(output, dict):
            output = output.get("data")
            # aos wraps evaluation output as {"output": ..., "json": ...}
            if isinstance(output, dict) and "output" in output:
                output = output["output"]
        if output is None:
            return ""
        return _stringify(output)

    @property
    def error_text(self) -> str | None:
        """Error reported by the unit, or None when evaluation succeeded."""
        if self.error in (None, "", {}):
            return None
        return _stringify(self.error)

    @property
    def first_message(self) -> Message | None:
        return self.messages[0] if self.messages else None


class ResultEdge(BaseModel):
    """One entry of a process's result history."""

    cursor: str
    node: ResultPayload


class ResultsPage(BaseModel):
    """Result history page.

    The unit returns edges in the requested sort order; each edge carries its
    own cursor which can be passed back as ``from_cursor`` to continue.
    """

    edges: list[ResultEdge] = Field(default_factory=list)

    @field_validator("edges", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class MessageReceipt(BaseModel):
    """Messenger unit acknowledgement of a submitted data item."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    message: str | None = None
