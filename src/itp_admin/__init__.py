"""ITP staff administration package.

This package is organized by feature modules (players, housing, calendar,
prospects, ...) with a thin Flask controller layer over service/repository
layers.
"""
