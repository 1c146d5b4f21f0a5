"""
JitLang Command-Line Interface
==============================

This package provides the command-line tool for JitLang:

- **jitl**: line-by-line lexer and parser front-end

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["jitl"]
