"""
Byte Python API

High-level interface for compiling Byte source into loadable scripts.
"""

from .context import Context, Script, create_context

__all__ = ['Context', 'Script', 'create_context']
