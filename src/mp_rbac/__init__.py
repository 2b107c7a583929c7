"""
mp_rbac – Role/permission policy evaluation engine.

Import path convention::

    from mp_rbac.rbac import RBACEngine, AccessContext
    from mp_rbac.kernel.errors import ValidationError
    from mp_rbac.config import RBACSettings
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
