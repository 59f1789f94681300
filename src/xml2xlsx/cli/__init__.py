"""Command-line interface module for xml2xlsx.

Provides the ``xml2xlsx convert`` command with configuration file support
and logging verbosity control.
"""

from .main import main

__all__ = ["main"]
