# Sphinx configuration for the combinargs API reference.

import sys
from pathlib import Path

sys.path.insert(0, Path(__file__).parents[2].resolve().as_posix())

project = "combinargs"
copyright = "2026, combinargs developers"
author = "combinargs developers"
release = "0.1.0"

# autodoc renders the module docstrings listed in index.rst; napoleon reads
# their numpy-style sections.
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.doctest",
    "sphinx.ext.napoleon",
]

autodoc_typehints = "none"

doctest_global_setup = """
from combinargs import parsers
parsers.TESTING = True
"""

html_theme = "sphinx_book_theme"
html_theme_options = {
    "home_page_in_toc": True,
}
