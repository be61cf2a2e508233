# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Schema inspection and authoring commands for the OpenSpec CLI."""

# Import command modules to register decorators
from . import (
    _fork as _fork,
    _init as _init,
    _validate as _validate,
    _which as _which,
)

# Re-export app
from ._app import app

__all__ = ["app"]
