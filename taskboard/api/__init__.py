"""
Procedure layer: the ``ProcedureRouter`` machinery, per-entity routes and the
HTTP adapter exposing them.
"""
