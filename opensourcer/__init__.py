"""
opensourcer - Deploy open-source software from a catalog onto the local machine.

This package provides a CLI and REST API for turning catalog entries into
running docker compose deployments and managing their lifecycle.
"""

__version__ = "0.1.0"
