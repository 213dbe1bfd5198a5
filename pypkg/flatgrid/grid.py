# Enable postponed evaluation of annotations
from __future__ import annotations
from partis.utils import TYPING

if TYPING:
  from typing import (
    Any,
    Optional )
  from collections.abc import Iterable, Iterator
  from .typing import N, R, C, Position, RowIndex

import logging
import operator
from copy import copy
from itertools import chain
from collections.abc import Sequence
import numpy as np

from .buffer import FlatBuffer
from .errors import (
  OutOfBoundsError,
  EmptyGridError )
from .utils import (
  as_flat,
  starts_from_counts,
  counts_from_starts,
  check_row_start )

log = logging.getLogger(__name__)

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
def _readonly(arr : np.ndarray) -> np.ndarray:
  arr.flags.writeable = False
  return arr

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
def _same_value(a, b) -> bool:
  if a is b:
    return True

  if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
    # NOTE: elementwise '==' has no single truth value
    return np.array_equal(a, b)

  return bool(a == b)

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
class Grid(Sequence):
  """Row-major grid where each row has an independent, changing length

  All elements are stored in a single flat buffer, concatenated row after row,
  together with a table of the index in the flat buffer where each row begins.
  The size of row ``i`` is ``row_start[i+1] - row_start[i]``, and the last row
  extends to the end of the flat buffer. Rows of size zero are allowed.

  As a :class:`~collections.abc.Sequence`, the grid is a sequence of rows,
  each row being a read-only view of the flat buffer.

  Parameters
  ----------
  dtype :
    Element storage type (default: ``object``).
  capacity :
    Number of elements to pre-allocate.

  Notes
  -----
  Arrays returned by element access and iteration alias the grid storage.
  They are only valid until the next operation that changes the length of a
  row or the number of rows.
  """

  __slots__ = ('_elements', '_row_start')

  #-----------------------------------------------------------------------------
  def __init__(self,
    dtype : Optional[np.dtype] = None,
    capacity : int = 0 ):

    if dtype is None:
      dtype = object

    self._elements = FlatBuffer(dtype, capacity)
    self._row_start = FlatBuffer(np.intp)

  #-----------------------------------------------------------------------------
  @classmethod
  def _from_arrays(cls,
    data : np.ndarray[(N,)],
    row_start : np.ndarray[(R,), np.dtype[np.intp]] ) -> Grid:

    grid = cls.__new__(cls)
    grid._elements = FlatBuffer.from_array(data)
    grid._row_start = FlatBuffer.from_array(np.asarray(row_start, dtype = np.intp))

    return grid

  #-----------------------------------------------------------------------------
  @classmethod
  def empty(cls, dtype : Optional[np.dtype] = None) -> Grid:
    """Grid without any rows
    """
    return cls(dtype = dtype)

  #-----------------------------------------------------------------------------
  @classmethod
  def filled(cls,
    rows : int,
    cols : int,
    value : Any,
    dtype : Optional[np.dtype] = None ) -> Grid:
    """Grid of ``rows`` rows of ``cols`` elements, each a copy of ``value``
    """
    rows = operator.index(rows)
    cols = operator.index(cols)

    if rows < 0:
      raise ValueError(f"'rows' must be non-negative: {rows}")

    if cols < 0:
      raise ValueError(f"'cols' must be non-negative: {cols}")

    proto = as_flat([value], dtype)
    data = np.empty(rows * cols, dtype = proto.dtype)

    if proto.dtype.kind == 'O':
      for i in range(len(data)):
        data[i] = copy(value)
    else:
      data.fill(proto[0])

    return cls._from_arrays(
      data,
      np.arange(rows, dtype = np.intp) * cols )

  #-----------------------------------------------------------------------------
  @classmethod
  def from_rows(cls,
    rows : Iterable[Iterable],
    dtype : Optional[np.dtype] = None ) -> Grid:
    """Grid with a copy of the elements of each given row

    Parameters
    ----------
    rows :
      Each row is a sequence of elements, rows may have different lengths
      (including zero).
    dtype :
      Element storage type. If not given, numeric and boolean types are
      inferred from the values, anything else is stored as ``object``.
    """
    rows = [list(row) for row in rows]

    return cls._from_arrays(
      as_flat(chain.from_iterable(rows), dtype),
      starts_from_counts([len(row) for row in rows]) )

  #-----------------------------------------------------------------------------
  @classmethod
  def from_flat(cls,
    data : Iterable,
    row_start : np.ndarray[(R,), np.dtype[np.integer]],
    dtype : Optional[np.dtype] = None ) -> Grid:
    """Grid from a flat row-major sequence and the start index of each row

    Parameters
    ----------
    data :
      Elements of all rows
    row_start :
      Index of the first element of each row, ``row_start[0] == 0``,
      non-decreasing, and ``row_start[-1] <= len(data)``.
    """
    if dtype is None and isinstance(data, np.ndarray):
      dtype = data.dtype

    data = as_flat(data, dtype)

    return cls._from_arrays(
      data,
      check_row_start(row_start, len(data)) )

  #-----------------------------------------------------------------------------
  def __copy__(self):
    cls = type(self)
    grid = cls.__new__(cls)

    grid._elements = copy(self._elements)
    grid._row_start = copy(self._row_start)

    return grid

  #-----------------------------------------------------------------------------
  def copy(self) -> Grid:
    return copy(self)

  #-----------------------------------------------------------------------------
  @property
  def dtype(self) -> np.dtype:
    return self._elements.dtype

  #-----------------------------------------------------------------------------
  @property
  def size(self) -> int:
    """Total number of elements in all rows
    """
    return len(self._elements)

  #-----------------------------------------------------------------------------
  @property
  def flat(self) -> np.ndarray[(N,)]:
    """Read-only view of all elements in row-major order
    """
    return _readonly(self._elements.array)

  #-----------------------------------------------------------------------------
  @property
  def row_start(self) -> np.ndarray[(R,), np.dtype[np.intp]]:
    """Read-only view of the index where each row begins in :attr:`flat`
    """
    return _readonly(self._row_start.array)

  #-----------------------------------------------------------------------------
  @property
  def row_idx(self) -> np.ndarray[(R+1,), np.dtype[np.intp]]:
    """Row start indices with the total size appended, row ``i`` is
    ``flat[row_idx[i]:row_idx[i+1]]``
    """
    return np.append(self._row_start.array, len(self._elements)).astype(np.intp)

  #-----------------------------------------------------------------------------
  @property
  def row_counts(self) -> np.ndarray[(R,), np.dtype[np.intp]]:
    return counts_from_starts(self._row_start.array, len(self._elements))

  #-----------------------------------------------------------------------------
  def row_count(self) -> int:
    return len(self._row_start)

  #-----------------------------------------------------------------------------
  def __len__(self):
    return len(self._row_start)

  #-----------------------------------------------------------------------------
  def _row_size(self, row : int) -> int:
    # NOTE: caller must have checked 0 <= row < len(self)
    starts = self._row_start.array

    if row < len(starts) - 1:
      end = starts[row+1]
    else:
      end = len(self._elements)

    return int(end - starts[row])

  #-----------------------------------------------------------------------------
  def _row_view(self, row : int) -> np.ndarray[(C,)]:
    start = int(self._row_start.array[row])
    return self._elements.array[start:start + self._row_size(row)]

  #-----------------------------------------------------------------------------
  def _check_row(self, row : int) -> int:
    row = operator.index(row)

    if not 0 <= row < len(self):
      raise OutOfBoundsError('row', row, len(self))

    return row

  #-----------------------------------------------------------------------------
  def _check_col(self, row : int, col : int, inclusive : bool = False) -> int:
    col = operator.index(col)
    size = self._row_size(row)

    if not (0 <= col < size or (inclusive and col == size)):
      raise OutOfBoundsError('col', col, size, inclusive = inclusive)

    return col

  #-----------------------------------------------------------------------------
  def _checked_index(self, row : int, col : int) -> int:
    row = self._check_row(row)
    col = self._check_col(row, col)

    return int(self._row_start.array[row]) + col

  #-----------------------------------------------------------------------------
  def _flat_index(self, row : int, col : int) -> Optional[int]:
    row = operator.index(row)
    col = operator.index(col)

    if not (
      0 <= row < len(self)
      and 0 <= col < self._row_size(row) ):

      return None

    return int(self._row_start.array[row]) + col

  #-----------------------------------------------------------------------------
  def _shift_starts(self, row : int, delta : int):
    """Shifts the start of every row strictly after ``row`` by ``delta``
    """
    self._row_start.array[row+1:] += delta

  #-----------------------------------------------------------------------------
  def row_size(self, row : int) -> Optional[int]:
    """Number of elements in a row, or None if there is no such row
    """
    row = operator.index(row)

    if 0 <= row < len(self):
      return self._row_size(row)

    return None

  #-----------------------------------------------------------------------------
  def get(self, row : int, col : int, default : Any = None) -> Any:
    """Element at ``(row, col)``, or ``default`` if outside the grid
    """
    idx = self._flat_index(row, col)

    if idx is None:
      return default

    return self._elements.array[idx]

  #-----------------------------------------------------------------------------
  def get_mut(self, row : int, col : int) -> Optional[np.ndarray[()]]:
    """Writable 0-d view of the element at ``(row, col)``, or None if outside
    the grid

    Assigning ``ref[()] = value`` writes through to the grid.
    """
    idx = self._flat_index(row, col)

    if idx is None:
      return None

    return self._elements.array[idx, ...]

  #-----------------------------------------------------------------------------
  def __getitem__(self, idx : RowIndex):
    if isinstance(idx, tuple):
      row, col = idx
      return self._elements.array[self._checked_index(row, col)]

    return _readonly(self._row_view(self._check_row(idx)))

  #-----------------------------------------------------------------------------
  def __setitem__(self, idx : Position, value : Any):
    row, col = idx
    i = self._checked_index(row, col)

    self._elements.array[i] = self._elements.coerce(value)

  #-----------------------------------------------------------------------------
  def __iter__(self):
    for i in range(len(self)):
      yield self[i]

  #-----------------------------------------------------------------------------
  def __contains__(self, value):
    return any(_same_value(v, value) for v in self.iter())

  #-----------------------------------------------------------------------------
  def index(self, row, start : int = 0, stop : Optional[int] = None) -> int:
    """Index of the first row with the same elements as ``row``

    Raises
    ------
    ValueError
      If no such row is found in ``[start, stop)``.
    """
    for i in range(len(self))[start:stop]:
      if _same_value(self[i], row):
        return i

    raise ValueError(f"Row not in grid: {row}")

  #-----------------------------------------------------------------------------
  def count(self, row) -> int:
    """Number of rows with the same elements as ``row``
    """
    return sum(1 for r in self if _same_value(r, row))

  #-----------------------------------------------------------------------------
  def reserve(self, n : int):
    """Pre-allocates room for ``n`` more elements
    """
    self._elements.reserve(n)

  #-----------------------------------------------------------------------------
  def push(self, value : Any) -> Position:
    """Appends a value to the end of the last row

    Returns
    -------
    position :
      ``(row, col)`` of the new element

    Raises
    ------
    EmptyGridError
      If the grid has no rows.
    """
    nrows = len(self)

    if nrows == 0:
      raise EmptyGridError(f"Grid has no rows, must add a row with 'push_new_row'")

    self._elements.append(value)

    return (nrows - 1, self._row_size(nrows - 1) - 1)

  #-----------------------------------------------------------------------------
  def push_new_row(self, value : Any) -> Position:
    """Appends a new row containing a single value
    """
    value = self._elements.coerce(value)

    self._row_start.append(len(self._elements))
    self._elements.append(value)

    return (len(self) - 1, 0)

  #-----------------------------------------------------------------------------
  def push_at_row(self, row : int, value : Any) -> Position:
    """Appends a value to the end of the given row
    """
    row = self._check_row(row)
    col = self._row_size(row)

    self.insert(row, col, value)

    return (row, col)

  #-----------------------------------------------------------------------------
  def insert(self, row : int, col : int, value : Any):
    """Inserts a value into a row before column ``col``

    Parameters
    ----------
    row :
      Index of row, ``0 <= row < len(grid)``
    col :
      Index of column, ``0 <= col <= row_size(row)``, where
      ``col == row_size(row)`` appends to the row.

    Raises
    ------
    OutOfBoundsError
      If either index is outside the valid range.
    """
    row = self._check_row(row)
    col = self._check_col(row, col, inclusive = True)

    self._elements.insert(int(self._row_start.array[row]) + col, value)
    self._shift_starts(row, 1)

  #-----------------------------------------------------------------------------
  def swap(self, first : Position, second : Position):
    """Exchanges the elements at two positions
    """
    i = self._checked_index(*first)
    j = self._checked_index(*second)

    data = self._elements.array
    data[i], data[j] = data[j], data[i]

  #-----------------------------------------------------------------------------
  def remove(self) -> Any:
    """Removes the last element of the last row

    The row itself is kept, even if it becomes empty.

    Returns
    -------
    value :
      The removed element, or None if there are no rows or the last row is
      empty.
    """
    nrows = len(self)

    if nrows == 0 or self._row_size(nrows - 1) == 0:
      return None

    return self._elements.pop()

  #-----------------------------------------------------------------------------
  def remove_row(self, row : int) -> np.ndarray[(C,)]:
    """Removes a row and all its elements

    Returns
    -------
    removed :
      Copy of the elements of the removed row
    """
    row = self._check_row(row)
    start = int(self._row_start.array[row])
    count = self._row_size(row)

    removed = self._elements.delete(start, start + count)
    self._shift_starts(row, -count)
    self._row_start.delete(row, row + 1)

    log.debug("Removed row %d with %d elements", row, count)

    return removed

  #-----------------------------------------------------------------------------
  def clear(self):
    """Removes all rows
    """
    self._elements.clear()
    self._row_start.clear()

  #-----------------------------------------------------------------------------
  def iter(self) -> Iterator:
    """Iterates over all elements in row-major order
    """
    return iter(self.flat)

  #-----------------------------------------------------------------------------
  def iter_mut(self) -> np.ndarray[(N,)]:
    """Writable view of all elements in row-major order
    """
    return self._elements.array

  #-----------------------------------------------------------------------------
  def iter_row(self, row : int) -> Iterator:
    """Iterates over the elements of one row

    Raises
    ------
    OutOfBoundsError
      If there is no such row.
    """
    return iter(self[row])

  #-----------------------------------------------------------------------------
  def iter_row_mut(self, row : int) -> np.ndarray[(C,)]:
    """Writable view of the elements of one row
    """
    return self._row_view(self._check_row(row))

  #-----------------------------------------------------------------------------
  def tolist(self) -> list[list]:
    return [row.tolist() for row in self]

  #-----------------------------------------------------------------------------
  def format(self, delimiter : str = ',') -> str:
    """Text with one line per row, each element separated by ``delimiter``
    """
    return ''.join(
      delimiter.join(str(v) for v in self.iter_row(row)) + '\n'
      for row in range(len(self)) )

  #-----------------------------------------------------------------------------
  def __str__(self):
    return self.format()

  #-----------------------------------------------------------------------------
  def __repr__(self):
    return f"{type(self).__name__}.from_rows({self.tolist()!r}, dtype = {self.dtype.name!r})"

  #-----------------------------------------------------------------------------
  def __eq__(self, other):
    if not isinstance(other, Grid):
      return NotImplemented

    return (
      len(self._elements) == len(other._elements)
      and np.array_equal(self._row_start.array, other._row_start.array)
      and all(_same_value(a, b) for a, b in zip(self.iter(), other.iter())) )

  __hash__ = None
