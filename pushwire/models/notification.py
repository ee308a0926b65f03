from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StructuredAlert(BaseModel):
    """Multi-field alert dictionary, serialized under the APNs key names.

    Keys a caller supplies beyond the known ones are kept and emitted as-is.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    body: str | None = None
    title: str | None = None
    title_loc_key: str | None = Field(default=None, alias="title-loc-key")
    title_loc_args: list[Any] | str | None = Field(default=None, alias="title-loc-args")
    action: str | None = None
    action_loc_key: str | None = Field(default=None, alias="action-loc-key")
    loc_key: str | None = Field(default=None, alias="loc-key")
    loc_args: list[Any] | str | None = Field(default=None, alias="loc-args")
    launch_image: str | None = Field(default=None, alias="launch-image")


class ApsFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    alert: str | StructuredAlert | None = None
    badge: int | None = None
    sound: str | None = None
    content_available: int | None = Field(default=None, alias="content-available")
    category: str | None = None
    url_args: list[Any] | None = Field(default=None, alias="url-args")

    def wire_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PreparedPush(BaseModel):
    token: str
    headers: dict[str, str | int] = Field(default_factory=dict)
    body: str
    length: int
    trimmed_chars: int = 0
    over_budget: bool = False
