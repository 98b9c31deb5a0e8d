"""
chaincp command groups.
"""
