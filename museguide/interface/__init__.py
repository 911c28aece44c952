"""Mini README: Interactive interfaces for the museum guide.

Exports the FastAPI application factory. The Typer launcher lives in the
repository root as ``main_guide.py``.
"""

from .web_app import create_application

__all__ = ["create_application"]
