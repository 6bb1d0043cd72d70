"""
Service layer abstraction.

Each service encapsulates business logic for a domain and receives its
repository at construction time, so storage can be swapped without
changing API handlers.
"""
