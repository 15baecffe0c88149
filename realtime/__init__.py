"""
Realtime collaboration app.

This app contains:
- A Channels consumer for `/ws/collab/`
- The in-memory session registry, presence manager and event router
- Deferred cleanup of sessions that stay empty
- REST views to create and inspect sessions
"""
