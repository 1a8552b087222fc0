"""
tmpltool - render templates from environment variables

A Jinja2 template renderer with a catalog of helper functions, filters and
is-tests for configuration files, Kubernetes manifests and scripts.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
