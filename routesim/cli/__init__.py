"""
routesim command line interface.

Runs forwarding or routing event scripts and prints the routers' literal
output lines on stdout.
"""

from .main import cli, main

__all__ = ["main", "cli"]
