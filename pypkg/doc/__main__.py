"""Builds the flatgrid documentation, run as ``python -m doc`` from ``pypkg/``
"""
from pathlib import Path
from partis.utils.sphinx import basic_main

#: directory holding 'conf.py' and 'index.rst'
DOC_DIR = Path(__file__).resolve().parent

#: repository root, containing 'pyproject.toml'
ROOT_DIR = DOC_DIR.parent.parent

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
def build_docs():
  basic_main(
    package = 'flatgrid',
    conf_dir = str(DOC_DIR),
    src_dir = str(DOC_DIR),
    root_dir = str(ROOT_DIR) )

#+++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++++
if __name__ == "__main__":
  build_docs()
