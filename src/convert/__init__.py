"""Classification and conversion pipelines.

This module decides what happens to each scanned TIFF and carries it
out exactly once, quarantining originals whenever a step fails.
"""
