# -*- coding: utf-8 -*-

from partis.utils.sphinx import basic_conf

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
# configuration
#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++

globals().update( basic_conf(
  package = 'flatgrid',
  author = "flatgrid developers",
  email = "flatgrid@example.org",
  copyright_year = '2026' ) )

# render the size aliases by name instead of expanding them
autodoc_type_aliases = {
  name : f'flatgrid.typing.{name}'
  for name in ['N', 'R', 'C', 'Position', 'RowIndex'] }
