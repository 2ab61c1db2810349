# Sphinx configuration file

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'src'))

from reactive_feedback import __version__  # noqa: E402

project = 'Reactive Feedback'
copyright = '2026, Reactive Feedback Authors'
author = 'Reactive Feedback Authors'
release = __version__
version = '.'.join(__version__.split('.')[:2])

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx.ext.intersphinx',
    'sphinx_autodoc_typehints',
]

templates_path = ['_templates']
exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

html_theme = 'sphinx_rtd_theme'
html_static_path = []

# Autodoc settings. Signals are dataclasses and records are pydantic models;
# their generated members are left out.
autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'special-members': '__call__, __enter__, __exit__',
    'undoc-members': True,
    'exclude-members': 'model_config, model_fields, model_computed_fields',
}
autodoc_typehints = 'description'
# Only needed for ``reactive-feedback serve``.
autodoc_mock_imports = ['uvicorn']

# Napoleon settings
napoleon_google_docstring = True
napoleon_numpy_docstring = False

# Intersphinx mapping
intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'pydantic': ('https://docs.pydantic.dev/latest', None),
}
