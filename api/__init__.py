"""
HTTP API for the medical journal directory.
"""
