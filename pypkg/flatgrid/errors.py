#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
class GridError(Exception):
  """Base class of errors raised by grid operations
  """
  pass

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
class OutOfBoundsError(GridError, IndexError):
  """Index passed to an operation that requires a valid position

  Parameters
  ----------
  axis :
    Either ``'row'`` or ``'col'``.
  index :
    The offending index.
  size :
    Upper bound of the valid range, ``[0, size)``.
  inclusive :
    If True, the valid range is ``[0, size]`` (e.g. an insertion column).
  """
  #-----------------------------------------------------------------------------
  def __init__(self, axis, index, size, inclusive = False):
    self.axis = axis
    self.index = index
    self.size = size
    self.inclusive = inclusive

    hi = size if inclusive else size - 1

    if hi < 0:
      msg = f"Out of bounds. No valid {axis} index, your index is {index}"
    else:
      msg = f"Out of bounds. {axis.capitalize()} index must be in the range [0,{hi}], your index is {index}"

    super().__init__(msg)

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
class EmptyGridError(GridError, IndexError):
  """Operation requires at least one row
  """
  pass
