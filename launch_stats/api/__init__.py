"""
HTTP endpoints for launch statistics.
"""
