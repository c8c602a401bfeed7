"""Sphinx configuration for flagcore documentation."""

from __future__ import annotations

import logging
import os
import sys
import warnings
from datetime import datetime

# Add the source directory to the path for autodoc
sys.path.insert(0, os.path.abspath("../src"))

from flagcore import __version__  # noqa: E402

# -- Project information -----------------------------------------------------

project = "flagcore"
copyright = f"{datetime.now().year}, flagcore contributors"  # noqa: A001
author = "flagcore contributors"
release = __version__
version = __version__

# -- General configuration ---------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx.ext.viewcode",
    "sphinx.ext.napoleon",
    "sphinx_copybutton",
    "sphinx_design",
    "myst_parser",
]

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]
source_suffix = {".rst": "restructuredtext", ".md": "markdown"}
master_doc = "index"
language = "en"

# -- Napoleon settings -------------------------------------------------------

napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_include_init_with_doc = True
napoleon_use_admonition_for_examples = True

# -- Autodoc settings --------------------------------------------------------

autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "undoc-members": True,
    "exclude-members": "__weakref__",
    "show-inheritance": True,
}
autodoc_class_signature = "separated"
autodoc_typehints = "description"

# Mock optional dependencies that may not be installed
autodoc_mock_imports = ["openfeature"]


class DuplicateObjectFilter(logging.Filter):
    """Filter out duplicate object description warnings from dataclass fields."""

    def filter(self, record: logging.LogRecord) -> bool:
        return "duplicate object description" not in record.getMessage()


for logger_name in ["sphinx.domains.python", "sphinx.domains", "sphinx"]:
    logging.getLogger(logger_name).addFilter(DuplicateObjectFilter())

warnings.filterwarnings("ignore", message=".*duplicate object description.*")

# -- Intersphinx settings ----------------------------------------------------

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "httpx": ("https://www.python-httpx.org/", None),
}

# -- MyST Parser settings ----------------------------------------------------

myst_enable_extensions = ["colon_fence", "deflist", "fieldlist"]
myst_heading_anchors = 3

# -- Copy button settings ----------------------------------------------------

copybutton_prompt_text = r">>> |\.\.\. |\$ "
copybutton_prompt_is_regexp = True

suppress_warnings = ["myst.header", "ref.python"]

# -- HTML output -------------------------------------------------------------

html_theme = "shibuya"
html_title = "flagcore"

html_theme_options = {
    "accent_color": "bronze",
    "nav_links": [
        {"title": "OpenFeature", "url": "https://openfeature.dev/"},
    ],
}
