from .connection import HttpConnection
from .graph_handler import GraphHandler

__all__ = ["GraphHandler", "HttpConnection"]
