"""Integration tests for components working together as a system.

Coverage:
    - FastAPI host endpoints over ASGI transport
    - Sign-in to chat workflow against an in-process fake identity service
"""
