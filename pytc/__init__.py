"""
pytc: a static type checker for annotated Python files.
"""

from .pipeline import CheckResult, check_file, check_source

__version__ = "0.1.0"
