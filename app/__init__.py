"""
HTTP layer for the expense tracker backend.
"""
