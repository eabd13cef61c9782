"""
API package for liveness, status and metrics endpoints
"""
