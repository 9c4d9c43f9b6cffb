"""
Domain layer - version model, error taxonomy and result type.

This layer contains:
- Value objects (immutable, self-validating)
- Typed errors carried by failed results
- The Result success/failure container

No dependencies on infrastructure or frameworks.
"""
