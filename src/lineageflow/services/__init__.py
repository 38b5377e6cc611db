"""Service layer — graph store, persistence, interaction, and the editor session.

Services may import from domain, infrastructure, and plugins.
They must never import from commands or output.
"""
