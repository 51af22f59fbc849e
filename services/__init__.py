"""
services/ - Business Logic Layer
=================================
Multi-step operations that coordinate several repositories.
"""
