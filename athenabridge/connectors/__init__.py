from athenabridge.connectors.base import ObjectStore, QueryEngine
from athenabridge.connectors.mock import MockObjectStore, MockQueryEngine

__all__ = [
    "ObjectStore",
    "QueryEngine",
    "MockObjectStore",
    "MockQueryEngine",
]
