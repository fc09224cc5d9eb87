"""
User profile documents: validation, defaults and store access.
"""
