"""
Utility modules for the recurring payment detection backend.
"""
