"""
Domain records shared by repositories and services.

Records carry the full stored state of a wish.  They are converted to
API schemas at the service boundary and never serialized directly.
"""
