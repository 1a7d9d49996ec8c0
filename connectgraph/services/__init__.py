"""
ConnectGraph services.

- ConnectionStore: connection CRUD with merge-or-create
- KnowledgeGraphService: facade over projection and analysis
"""

from connectgraph.services.connection_store import ConnectionStore
from connectgraph.services.knowledge_graph import KnowledgeGraphService

__all__ = [
    "ConnectionStore",
    "KnowledgeGraphService",
]
