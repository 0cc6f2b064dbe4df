# -*- coding: utf-8 -*-

__version__ = "0.4.0"
__author__ = "Max Allan Niklasson"


from .main import Database, ColumnSpec  # noqa: E402

__all__ = ["Database", "ColumnSpec", "__version__"]
