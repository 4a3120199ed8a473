"""
Services package for the recurring payment detection backend.
"""
