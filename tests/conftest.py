import pytest

from flatgrid import Grid

# 10, 5, 4
# 3, 9
# 1
# 7, 6, 2, 8
ROWS = [
  [10, 5, 4],
  [3, 9],
  [1],
  [7, 6, 2, 8] ]

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
@pytest.fixture
def rows():
  return [list(row) for row in ROWS]

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
@pytest.fixture
def grid(rows):
  return Grid.from_rows(rows)
