from .errors import (
  GridError,
  OutOfBoundsError,
  EmptyGridError )
from .buffer import FlatBuffer
from .grid import Grid
