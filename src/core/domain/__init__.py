"""Domain models and entities.

Why:
- Pure, strict data structures (Pydantic v2) and error types live here.
- The domain knows nothing about HTTP, the CLI or the filesystem.
"""
