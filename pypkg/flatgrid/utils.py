# Enable postponed evaluation of annotations
from __future__ import annotations
from partis.utils import TYPING

if TYPING:
  from typing import (
    Any,
    Optional )
  from collections.abc import Iterable
  from .typing import N, R

import numpy as np

# dtype kinds stored natively, everything else becomes 'object'
NATIVE_KINDS = 'biufc'

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
def cast_exact(
  values : Any,
  dtype : np.dtype ) \
  -> np.ndarray:
  """Converts values to a numeric or boolean dtype only if no value changes

  Integers may move between signed and unsigned types of any width as long as
  every value is representable. Otherwise only 'same_kind' casts are allowed,
  so a float is never truncated into an integer and a number never becomes a
  bool. Other storage types follow plain numpy conversion.

  Raises
  ------
  ValueError
    If the values cannot be stored without being changed.
  """
  dtype = np.dtype(dtype)

  if dtype.kind not in NATIVE_KINDS:
    return np.asarray(values, dtype = dtype)

  src = np.asarray(values)

  if src.size == 0:
    return np.empty(src.shape, dtype = dtype)

  if not (
    np.can_cast(src.dtype, dtype, casting = 'same_kind')
    or (src.dtype.kind in 'iu' and dtype.kind in 'iu') ):

    raise ValueError(f"Must have values castable to {dtype}: {src.dtype}")

  data = src.astype(dtype)

  if dtype.kind in 'biu' and not np.array_equal(data, src):
    raise ValueError(f"Must have values representable as {dtype}: {src.dtype}")

  return data

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
def as_flat(
  values : Iterable,
  dtype : Optional[np.dtype] = None ) \
  -> np.ndarray[(N,)]:
  """Converts a sequence of element values into a 1D array

  Parameters
  ----------
  values :
    Element values, each one becoming exactly one entry of the result.
  dtype :
    Storage type. If not given, it is inferred from the values: numeric and
    boolean types are kept, anything else is stored as ``object``.

  Returns
  -------
  data :
    New array with ``len(data) == len(values)``
  """
  values = list(values)

  if dtype is not None:
    dtype = np.dtype(dtype)

    if dtype.kind != 'O':
      data = cast_exact(values, dtype)

      if data.ndim != 1:
        raise ValueError(f"Must have scalar values of dtype {dtype}: shape {data.shape}")

      return np.array(data)

  elif len(values):
    try:
      data = np.asarray(values)
    except (ValueError, TypeError):
      # inhomogeneous shapes
      data = None

    if (
      data is not None
      and data.ndim == 1
      and data.dtype.kind in NATIVE_KINDS ):

      return np.array(data)

  data = np.empty(len(values), dtype = object)

  # NOTE: element-wise assignment, a sequence value must not be broadcast
  for i, v in enumerate(values):
    data[i] = v

  return data

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
def starts_from_counts(
  row_counts : np.ndarray[(R,), np.dtype[np.integer]] ) \
  -> np.ndarray[(R,), np.dtype[np.intp]]:
  """Start index of each row in the flat buffer, given the size of each row
  """
  row_counts = np.asarray(row_counts, dtype = np.intp)

  if len(row_counts) == 0:
    return np.zeros(0, dtype = np.intp)

  return np.concatenate(([0], np.cumsum(row_counts[:-1]))).astype(np.intp)

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
def counts_from_starts(
  row_start : np.ndarray[(R,), np.dtype[np.integer]],
  size : int ) \
  -> np.ndarray[(R,), np.dtype[np.intp]]:
  """Size of each row, given the start index of each row and the total size
  """
  return np.diff(np.append(np.asarray(row_start, dtype = np.intp), size)).astype(np.intp)

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
def check_row_start(
  row_start : np.ndarray[(R,), np.dtype[np.integer]],
  size : int ) \
  -> np.ndarray[(R,), np.dtype[np.intp]]:
  """Validates a row start table against a flat buffer of the given size

  Parameters
  ----------
  row_start :
    Index of the first element of each row, where row ``i`` is
    ``data[row_start[i]:row_start[i+1]]`` and the last row extends to the end
    of the buffer.
  size :
    Total number of elements in the flat buffer.

  Returns
  -------
  row_start :
    Contiguous copy with dtype ``np.intp``

  Raises
  ------
  ValueError
    If ``row_start`` is not 1D integral, ``row_start[0] != 0``,
    ``row_start`` is decreasing anywhere, or ``row_start[-1] > size``.
  """
  row_start = np.array(row_start)

  if row_start.ndim != 1:
    raise ValueError(f"Must have row_start.ndim = 1: {row_start.ndim}")

  if len(row_start) == 0:
    if size != 0:
      raise ValueError(f"Must have len(data) = 0 without any rows: {size}")

    return np.zeros(0, dtype = np.intp)

  if not np.issubdtype(row_start.dtype, np.integer):
    raise ValueError(f"Must have integral row_start.dtype: {row_start.dtype}")

  if row_start[0] != 0:
    raise ValueError(f"Must have row_start[0] = 0: {row_start[0]}")

  if row_start[-1] > size:
    raise ValueError(f"Must have row_start[-1] <= len(data) = {size}: {row_start[-1]}")

  if not np.all(np.diff(row_start) >= 0):
    raise ValueError(f"Must have row_start[i] <= row_start[i+1]")

  return row_start.astype(np.intp)
