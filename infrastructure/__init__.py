"""
Infrastructure Package
======================

Wires the identity provider and the back-office domain services together.

Modules:
    - container: lazily built, cached service instances
"""
