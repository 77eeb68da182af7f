# Package initializer for the team status backend.

"""
The `statusboard` package contains the team availability backend.

Modules:

- ``config``: application settings loaded from environment variables.
- ``errors``: the exception hierarchy shared by the core and the boundaries.
- ``timeutil``: ``HH:MM`` parsing and formatting helpers.
- ``models``: Pydantic data models for snapshots, slots and API bodies.
- ``classifier``: derives a traffic-light status from busy blocks.
- ``intersector``: finds time slots where every participant is free.
- ``fallback``: placeholder slot strategies used when the store is down.
- ``store``: the persistence collaborator contract and an in-memory store.
- ``service``: the status-save, slot-search and booking boundaries.
- ``main``: the FastAPI application definition.

"""
