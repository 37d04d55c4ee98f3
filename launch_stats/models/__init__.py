"""
Data models for launch records and derived statistics.
"""
