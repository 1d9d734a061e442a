"""
attrbrowser package
===================

A terminal browser for a static collection of custom attribute records.

- The CLI entry point is in `attrbrowser/cli.py`.
- Loading + normalizing the JSON document is in `attrbrowser/loader.py`.
- Searching / filtering is in `attrbrowser/engine.py`.
- HTML views are built in `attrbrowser/render.py`.
- Fragment routing and event dispatch are in `attrbrowser/navigation.py`.
"""

__version__ = '0.1.0'
