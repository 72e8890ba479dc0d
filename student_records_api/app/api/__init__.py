"""
HTTP layer.

``router.py`` exposes the top-level ``router`` that aggregates the
domain routers in ``endpoints``.  Error translation lives in
``errors.py``.
"""
