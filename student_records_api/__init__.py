"""
Top-level package for the Student Records API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``student_records_api.app.main:app`` or build one with
``create_app``.
"""

__all__ = []
