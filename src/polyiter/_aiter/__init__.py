from ._main import AsyncIter

__all__ = ["AsyncIter"]
