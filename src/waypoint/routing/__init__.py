"""Routing — route registry and hash matching.

Routes are registered during setup; hashes are resolved against the
registry on every location change.
"""
