"""
Application package.

Layers, leaf first: ``schemas`` (payload models), ``services.validator``
(record validation), ``storage`` (backend adapters), ``services``
(record service) and ``api`` (HTTP endpoints).  ``main.create_app``
wires them together.
"""
