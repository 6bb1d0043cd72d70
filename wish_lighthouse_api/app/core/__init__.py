"""
Cross-cutting infrastructure: settings, logging, SQLite access, the
error taxonomy, bearer tokens and demo data.
"""
