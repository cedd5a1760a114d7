"""Build storage backends."""

from .build_store import BuildStore, InMemoryBuildStore, JSONFileBuildStore

__all__ = ["BuildStore", "InMemoryBuildStore", "JSONFileBuildStore"]
