"""Boundary between the upload core and its hosting workflow engine.

The core reads credentials, items, per-item parameters and the batch failure
policy through WorkflowHost, and binary attachments through AttachmentStore.
StaticHost / InputItem are in-memory implementations used by the CLI, the
HTTP surface and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence

from tweetmedia.core.errors import ConfigurationError

# Parameter names read per item
BINARY_PROPERTY_NAME = "binaryPropertyName"
MEDIA_DATA = "mediaData"
ADDITIONAL_OWNERS = "additionalOwners"
MEDIA_CATEGORY = "mediaCategory"


@dataclass(frozen=True)
class Attachment:
    """Named binary attachment on an input item."""

    mime_type: str | None
    payload: bytes
    file_name: str | None = None


class AttachmentStore(Protocol):
    """Read-only view of one item's binary attachments."""

    def list_attachments(self) -> list[str]: ...

    def get_attachment(self, name: str) -> Attachment | None: ...


class WorkflowHost(Protocol):
    """What the batch driver needs from its host."""

    def get_credentials(self) -> Mapping[str, str]: ...

    def get_input_items(self) -> Sequence[AttachmentStore]: ...

    def get_parameter(self, name: str, item_index: int) -> Any | None: ...

    def continue_on_failure(self) -> bool: ...


@dataclass
class InputItem:
    """Dict-backed attachment store. Listing order is insertion order."""

    attachments: dict[str, Attachment] = field(default_factory=dict)

    def list_attachments(self) -> list[str]:
        return list(self.attachments)

    def get_attachment(self, name: str) -> Attachment | None:
        return self.attachments.get(name)


class StaticHost:
    """In-memory host: fixed credentials, items and parameters.

    Parameters can be set batch-wide (`parameters`) or per item
    (`item_parameters[index]`); per-item values win.
    """

    def __init__(
        self,
        credentials: Mapping[str, str] | None,
        items: Sequence[AttachmentStore],
        parameters: Mapping[str, Any] | None = None,
        item_parameters: Mapping[int, Mapping[str, Any]] | None = None,
        continue_on_failure: bool = False,
    ):
        self._credentials = credentials
        self._items = list(items)
        self._parameters = dict(parameters or {})
        self._item_parameters = {k: dict(v) for k, v in (item_parameters or {}).items()}
        self._continue_on_failure = continue_on_failure

    def get_credentials(self) -> Mapping[str, str]:
        if not self._credentials:
            raise ConfigurationError("No credentials provided")
        return self._credentials

    def get_input_items(self) -> Sequence[AttachmentStore]:
        return self._items

    def get_parameter(self, name: str, item_index: int) -> Any | None:
        item_params = self._item_parameters.get(item_index, {})
        if name in item_params:
            return item_params[name]
        return self._parameters.get(name)

    def continue_on_failure(self) -> bool:
        return self._continue_on_failure
