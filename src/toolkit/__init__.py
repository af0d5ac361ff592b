"""External image tool layer.

This module wraps the command-line imaging tools behind a narrow
capability protocol consumed by the conversion pipelines.
"""
