from generate_metadata.adapters.head import HeadAdapter
from generate_metadata.adapters.metadata import MetadataAdapter

__all__ = ["HeadAdapter", "MetadataAdapter"]
