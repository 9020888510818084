"""Service layer: use-case orchestration over ports and units of work.

Import concrete services from their subpackages, e.g.
:mod:`tubehub.services.auth` or :mod:`tubehub.services.identity`.
"""
