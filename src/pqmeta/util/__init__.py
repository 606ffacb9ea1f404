from .http_file import HttpFile

__all__ = [
    'HttpFile',
]
