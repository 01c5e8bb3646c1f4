"""
Utility modules for CineShelf.

Cross-cutting concerns:
- Storage: Durable flat-file persistence
- Auth: Shared-secret credential gate
- Errors: Catalog error taxonomy
"""
