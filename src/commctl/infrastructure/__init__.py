"""Infrastructure layer — SQLite persistence, entity stores, marketplace.

This layer depends on stdlib and third-party libs (SQLAlchemy, Alembic).
It must never import from services, commands, or output. Domain models
are passed in by type so stores can decode rows into them.
"""
