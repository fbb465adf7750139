"""Services Layer - enrollment use cases orchestrating the core around async IO.

Invariants:
    - Collaborators injected through core/repository_protocols.py types
    - No service imports from api/ or infrastructure/
"""
