from collections.abc import Mapping
from typing import Any, ClassVar, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ProtocolViolation
from .options import ReadOptions

ENTRY_ID = "_id"
ENTRY_KEY = "_key"
ENTRY_REV = "_rev"
ENTRY_FROM = "_from"
ENTRY_TO = "_to"
LABEL_ATTRIBUTE = "$label"


def split_document_id(document_id: Any) -> tuple[str, str]:
    """Split ``"<collection>/<key>"`` into its two parts.

    Raises:
        ProtocolViolation: If the id is not collection-qualified.
    """
    if not isinstance(document_id, str) or "/" not in document_id:
        raise ProtocolViolation(
            f"Got an invalid response from the server: malformed document id {document_id!r}"
        )
    collection, key = document_id.split("/", 1)
    if not collection or not key:
        raise ProtocolViolation(
            f"Got an invalid response from the server: malformed document id {document_id!r}"
        )
    return collection, key


class Graph(BaseModel):
    """A named pair of vertex and edge collections."""

    key: str = Field(alias=ENTRY_KEY)
    vertices: str
    edges: str
    internal_id: Optional[str] = Field(default=None, alias=ENTRY_ID)
    revision: Optional[str] = Field(default=None, alias=ENTRY_REV)

    model_config = ConfigDict(populate_by_name=True)

    def get_all(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Document(BaseModel):
    """A stored document: reserved identity fields plus free-form attributes."""

    INTERNAL_KEYS: ClassVar[tuple[str, ...]] = (ENTRY_ID, ENTRY_KEY, ENTRY_REV)

    internal_id: Optional[str] = Field(default=None, alias=ENTRY_ID)
    key: Optional[str] = Field(default=None, alias=ENTRY_KEY)
    revision: Optional[str] = Field(default=None, alias=ENTRY_REV)
    attributes: Dict[str, Any] = Field(default_factory=dict)
    read_options: ReadOptions = Field(default_factory=ReadOptions, exclude=True)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_server(
        cls,
        data: Mapping[str, Any],
        options: Union[ReadOptions, Mapping[str, Any], None] = None,
    ):
        """Build a record from a server entry, remembering the read options."""
        if isinstance(options, ReadOptions):
            read_options = options
        else:
            read_options = ReadOptions.model_validate(dict(options or {}))
        values = dict(data)
        internals = {k: values.pop(k) for k in cls.INTERNAL_KEYS if k in values}
        return cls.model_validate(
            {**internals, "attributes": values, "read_options": read_options}
        )

    def _internal_values(self) -> Dict[str, Any]:
        return {ENTRY_ID: self.internal_id, ENTRY_KEY: self.key, ENTRY_REV: self.revision}

    def set(self, name: str, value: Any) -> None:
        if name == ENTRY_ID:
            self.internal_id = value
        elif name == ENTRY_KEY:
            self.key = value
        elif name == ENTRY_REV:
            self.revision = value
        else:
            self.attributes[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        internals = self._internal_values()
        if name in internals:
            return internals[name]
        return self.attributes.get(name, default)

    def get_all(self, include_internals: Optional[bool] = None) -> Dict[str, Any]:
        """Return the exposed attributes.

        Hidden attributes are left out unless ``ignore_hidden_attributes`` was
        requested; internal fields are added when ``include_internals`` is set
        (explicitly or through the read options the record was fetched with).
        """
        opts = self.read_options
        if include_internals is None:
            include_internals = opts.include_internals
        data = {
            name: value
            for name, value in self.attributes.items()
            if opts.ignore_hidden_attributes or name not in opts.hidden_attributes
        }
        if include_internals:
            data.update({k: v for k, v in self._internal_values().items() if v is not None})
        return data

    def to_body(self) -> Dict[str, Any]:
        """Serialise for a write request; ``_key`` is sent whenever it is set."""
        body = dict(self.attributes)
        if self.key is not None:
            body[ENTRY_KEY] = self.key
        return body

    def apply_server_identity(self, entry: Mapping[str, Any]) -> None:
        """
        Copy the server-assigned ``_id``/``_rev`` into the record.

        The key part of ``_id`` must equal the key the record already carries;
        a record without a key adopts the server's.

        Raises:
            ProtocolViolation: If the entry has no valid id, or the key part of
                the id does not match the record's key.
        """
        if ENTRY_ID not in entry:
            raise ProtocolViolation("Got an invalid response from the server: missing _id")
        internal_id = entry[ENTRY_ID]
        _, document_key = split_document_id(internal_id)

        if self.key is not None and document_key != self.key:
            raise ProtocolViolation(
                f"Got an invalid response from the server: id {internal_id!r} does not match key {self.key!r}"
            )

        self.internal_id = internal_id
        self.key = document_key
        self.revision = entry.get(ENTRY_REV)


class Vertex(Document):
    """A document stored in a graph's vertex collection."""


class Edge(Document):
    """A document connecting two vertices."""

    INTERNAL_KEYS: ClassVar[tuple[str, ...]] = Document.INTERNAL_KEYS + (ENTRY_FROM, ENTRY_TO)

    from_: Optional[str] = Field(default=None, alias=ENTRY_FROM)
    to: Optional[str] = Field(default=None, alias=ENTRY_TO)

    @property
    def label(self) -> Optional[str]:
        return self.attributes.get(LABEL_ATTRIBUTE)

    def set_label(self, value: Optional[str]) -> None:
        self.attributes[LABEL_ATTRIBUTE] = value

    def _internal_values(self) -> Dict[str, Any]:
        values = super()._internal_values()
        values[ENTRY_FROM] = self.from_
        values[ENTRY_TO] = self.to
        return values

    def set(self, name: str, value: Any) -> None:
        if name == ENTRY_FROM:
            self.from_ = value
        elif name == ENTRY_TO:
            self.to = value
        else:
            super().set(name, value)

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.from_ is not None:
            body[ENTRY_FROM] = self.from_
        if self.to is not None:
            body[ENTRY_TO] = self.to
        return body
