"""Domain layer — graph models, ids, change-sets, and edit state machines.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
