from .metadata import MetadataParser

__all__ = ['MetadataParser']
