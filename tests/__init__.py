"""Test package for Bootstrap Chat.

Structure:
    - unit/: Individual function and class tests
    - integration/: Components working together behind fake remote services

Leverages pytest with pytest-check for soft assertions.
"""
