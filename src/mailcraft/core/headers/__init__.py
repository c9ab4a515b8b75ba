from .store import Header, HeaderStore, canonical_name

__all__ = ["Header", "HeaderStore", "canonical_name"]
