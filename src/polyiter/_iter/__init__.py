from ._main import Iter

__all__ = ["Iter"]
