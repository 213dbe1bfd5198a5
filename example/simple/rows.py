from partis.utils import init_logging

init_logging(
  'debug',
  # autodetect color
  with_color = None )

import numpy as np
from flatgrid import (
  Grid,
  OutOfBoundsError )

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
def build_by_push():
  grid = Grid(dtype = np.int32)

  grid.push_new_row(10)
  grid.push(5)
  grid.push(4)

  grid.push_new_row(3)
  grid.push(9)

  grid.push_new_row(1)

  grid.push_new_row(7)
  grid.push(6)
  grid.push(2)
  grid.push(8)

  return grid

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
def run_edits():
  grid = build_by_push()
  print(grid)

  grid.insert(2, 1, 99)
  grid.swap((0, 1), (3, 2))
  grid.push_at_row(1, 11)
  print(grid)
  print('row_idx:', grid.row_idx)

  removed = grid.remove_row(0)
  print('removed:', removed)
  print(grid.format(' '))

  try:
    grid.iter_row(grid.row_count())
  except OutOfBoundsError as e:
    print(e)

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
if __name__ == '__main__':
  run_edits()
