# Enable postponed evaluation of annotations
from __future__ import annotations
from partis.utils import TYPING

if TYPING:
  from typing import Any
  from .typing import N

import logging
from copy import copy
import numpy as np

from .utils import cast_exact

log = logging.getLogger(__name__)

#: Smallest capacity allocated when a buffer first grows
MIN_CAPACITY = 8

#: Multiplier applied to the capacity when a buffer must grow
GROWTH_FACTOR = 2

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
class FlatBuffer:
  """Growable contiguous 1D array

  Elements ``[0, len(buf))`` are live, the remainder of the allocation is
  spare capacity so that appending is amortized constant time.

  Parameters
  ----------
  dtype :
    Element storage type
  capacity :
    Number of elements to pre-allocate
  """

  __slots__ = ('_data', '_size')

  #-----------------------------------------------------------------------------
  def __init__(self, dtype = object, capacity : int = 0):
    capacity = int(capacity)

    if capacity < 0:
      raise ValueError(f"'capacity' must be non-negative: {capacity}")

    self._data = np.empty(capacity, dtype = dtype)
    self._size = 0

  #-----------------------------------------------------------------------------
  @classmethod
  def from_array(cls, data : np.ndarray[(N,)]) -> FlatBuffer:
    """Buffer initialized with a copy of a 1D array
    """
    data = np.array(data)

    if data.ndim != 1:
      raise ValueError(f"Must have data.ndim = 1: {data.ndim}")

    buf = cls.__new__(cls)
    buf._data = data
    buf._size = len(data)

    return buf

  #-----------------------------------------------------------------------------
  def __copy__(self):
    cls = type(self)
    buf = cls.__new__(cls)

    buf._data = copy(self._data)
    buf._size = self._size

    return buf

  #-----------------------------------------------------------------------------
  def copy(self) -> FlatBuffer:
    return copy(self)

  #-----------------------------------------------------------------------------
  def __len__(self):
    return self._size

  #-----------------------------------------------------------------------------
  @property
  def capacity(self) -> int:
    return len(self._data)

  #-----------------------------------------------------------------------------
  @property
  def dtype(self) -> np.dtype:
    return self._data.dtype

  #-----------------------------------------------------------------------------
  @property
  def array(self) -> np.ndarray[(N,)]:
    """Writable view of the live elements
    """
    return self._data[:self._size]

  #-----------------------------------------------------------------------------
  def coerce(self, value : Any) -> Any:
    """Converts a value to the element type without modifying the buffer

    Raises
    ------
    ValueError
      If the value does not correspond to a single element, or would be
      changed by conversion (e.g. a float truncated into an integer).
    """
    if self.dtype.kind == 'O':
      return value

    if np.ndim(value) != 0:
      raise ValueError(f"Must be a single value of dtype {self.dtype}: shape {np.shape(value)}")

    return cast_exact(value, self.dtype)[()]

  #-----------------------------------------------------------------------------
  def reserve(self, n : int):
    """Ensures room for at least ``n`` more elements without re-allocation
    """
    needed = self._size + int(n)

    if needed <= len(self._data):
      return

    capacity = max(needed, GROWTH_FACTOR * len(self._data), MIN_CAPACITY)

    log.debug(
      "Growing %s buffer: %d -> %d",
      self.dtype,
      len(self._data),
      capacity )

    data = np.empty(capacity, dtype = self.dtype)
    data[:self._size] = self._data[:self._size]

    self._data = data

  #-----------------------------------------------------------------------------
  def insert(self, index : int, value : Any):
    """Inserts a value before ``index``, shifting later elements right by one

    Parameters
    ----------
    index :
      Position in the range ``[0, len(buf)]``
    """
    if not 0 <= index <= self._size:
      raise IndexError(f"Must have 0 <= index <= {self._size}: {index}")

    value = self.coerce(value)
    self.reserve(1)

    n = self._size
    # NOTE: numpy handles the overlapping source and destination
    self._data[index+1:n+1] = self._data[index:n]
    self._data[index] = value
    self._size = n + 1

  #-----------------------------------------------------------------------------
  def append(self, value : Any):
    value = self.coerce(value)
    self.reserve(1)

    self._data[self._size] = value
    self._size += 1

  #-----------------------------------------------------------------------------
  def pop(self) -> Any:
    """Removes and returns the last element
    """
    if self._size == 0:
      raise IndexError(f"Pop from empty buffer")

    self._size -= 1
    value = self._data[self._size]

    if self.dtype.kind == 'O':
      self._data[self._size] = None

    return value

  #-----------------------------------------------------------------------------
  def delete(self, start : int, stop : int) -> np.ndarray[(N,)]:
    """Removes elements ``[start, stop)``, shifting later elements left

    Returns
    -------
    removed :
      Copy of the removed elements
    """
    n = self._size

    if not 0 <= start <= stop <= n:
      raise IndexError(f"Must have 0 <= start <= stop <= {n}: [{start},{stop})")

    removed = self._data[start:stop].copy()
    count = stop - start

    self._data[start:n-count] = self._data[stop:n]

    if self.dtype.kind == 'O':
      # release references held past the new end
      self._data[n-count:n] = None

    self._size = n - count

    return removed

  #-----------------------------------------------------------------------------
  def clear(self):
    if self.dtype.kind == 'O':
      self._data[:self._size] = None

    self._size = 0
