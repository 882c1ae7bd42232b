"""GUI shell entry points.

Imports of ``customtkinter`` are deferred until ``run_app`` is called so the
core and the ``--list`` mode work without a display.
"""

from __future__ import annotations


def run_app(*args, **kwargs):
    """Lazily import the window module to avoid loading Tk on package import."""
    from .app import run_app as _run_app

    return _run_app(*args, **kwargs)


__all__ = ["run_app"]
