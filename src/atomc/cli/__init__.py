"""
AtomC Command-Line Interface
============================

- **atomc**: Lexical and syntax checker for AtomC sources

Implemented as a Click application with the shared exit codes from
``atomc.cli.errors``.
"""

__all__ = ["atomc"]
