"""
Push notifications and fire-and-forget background dispatch.
"""
