"""
utils/ - Shared helpers
=======================
Logging, the response envelope, API errors, pagination and field validators.
"""
