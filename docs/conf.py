# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Project information -----------------------------------------------------

project = 'caliper'
author = 'Caliper contributors'
html_title = 'Caliper Docs'

# -- General configuration ---------------------------------------------------

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx_copybutton',
    "myst_parser"
]

# numpy-style "Attributes" sections in the class docstrings
napoleon_numpy_docstring = True
autodoc_member_order = "bysource"

exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']


# -- Options for HTML output -------------------------------------------------

html_theme = "furo"

html_theme_options = {
    "sidebar_hide_name": False,
    "navigation_with_keys": True,
    "light_css_variables": {
        "color-brand-primary": "#2980b9",
        "color-brand-content": "#1f4e79",
    },
}


source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}
