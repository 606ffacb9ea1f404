from .metadata import MetadataSerializer

__all__ = ['MetadataSerializer']
