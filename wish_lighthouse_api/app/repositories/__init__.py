"""
Storage layer.

Repositories hide how wishes are persisted.  Services receive a
``WishRepository`` instance at construction time, so the in-memory
store used in demos and tests can be swapped for SQLite without
touching business logic.
"""
