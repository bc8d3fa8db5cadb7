"""Unit tests for individual components in isolation.

Coverage:
    - models/: Pydantic validation
    - agent/: Completion configuration and service
    - auth/: Configuration, HTTP client and session manager
    - chat/: Chat session state machine

Uses fakes or mocks for the remote services.
"""
