"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules, organised by layer:

* ``core``: configuration, logging, database, errors and security;
* ``models``: domain records;
* ``repositories``: wish storage backends;
* ``services``: business rules;
* ``schemas``: request and response models;
* ``api``: HTTP routes.
"""

from .main import app  # noqa: F401
