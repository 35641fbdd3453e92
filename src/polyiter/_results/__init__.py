from ._option import NONE, NoneOption, Option, OptionUnwrapError, Some

__all__ = ["NONE", "NoneOption", "Option", "OptionUnwrapError", "Some"]
