"""Domain models and entities.

Pure data structures (Pydantic v2). The domain knows nothing about HTTP,
object storage or the CLI.
"""
