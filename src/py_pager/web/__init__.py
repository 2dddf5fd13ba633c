"""JSON web API for the simulator.

This package provides a Flask application that exposes the policy
engine over HTTP.  It is an **optional** extra — install with::

    pip install py-pager[web]

The ``create_app`` factory in ``app.py`` serves four endpoints:

- ``GET /api/config`` — input bounds, defaults and policy names.
- ``GET /api/generate`` — a random reference string.
- ``POST /api/faults`` — fault count for one policy.
- ``POST /api/compare`` — fault counts for every policy.
"""
