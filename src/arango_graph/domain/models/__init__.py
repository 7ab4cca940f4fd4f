from .graph_elements import (
    ENTRY_FROM,
    ENTRY_ID,
    ENTRY_KEY,
    ENTRY_REV,
    ENTRY_TO,
    LABEL_ATTRIBUTE,
    Document,
    Edge,
    Graph,
    Vertex,
    split_document_id,
)
from .options import (
    OperationKind,
    OperationOptions,
    ReadOptions,
    UpdatePolicy,
    resolve_operation_params,
)

__all__ = [
    "Document",
    "Edge",
    "ENTRY_FROM",
    "ENTRY_ID",
    "ENTRY_KEY",
    "ENTRY_REV",
    "ENTRY_TO",
    "Graph",
    "LABEL_ATTRIBUTE",
    "OperationKind",
    "OperationOptions",
    "ReadOptions",
    "UpdatePolicy",
    "Vertex",
    "resolve_operation_params",
    "split_document_id",
]
