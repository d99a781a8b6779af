"""
memvfs test suite.

Run with: python -m pytest memvfs/tests -v
"""
