"""
models/ - Request and response schemas
=======================================
pydantic models per entity plus the response envelope.
"""
