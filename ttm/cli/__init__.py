"""
Command line interface for TTM.
"""
