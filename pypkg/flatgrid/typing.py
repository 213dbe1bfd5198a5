from typing import Union
from partis.utils.typing import NewType

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++

N = NewType('N', int)
"""A variable number of elements in the flat buffer
"""

R = NewType('R', int)
"""A variable number of rows
"""

C = NewType('C', int)
"""A variable number of elements in a single row
"""

Position = NewType('Position', tuple[int, int])
"""The ``(row, col)`` address of an element
"""

RowIndex = NewType('RowIndex', Union[int, tuple[int, int]])
"""Either a row index, or a ``(row, col)`` element address
"""
