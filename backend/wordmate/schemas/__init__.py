# wordmate/schemas/__init__.py
"""
Schema module initialization.
Exports all schema classes from submodules for convenient imports.
"""
from .auth import *
from .payment import *
from .redemption import *
from .subscription import *
