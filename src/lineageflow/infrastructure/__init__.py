"""Infrastructure layer — local storage database and graph layout.

This layer depends on stdlib and third-party libs (SQLAlchemy, NetworkX).
It may import domain models but never services, commands, or output.
"""
