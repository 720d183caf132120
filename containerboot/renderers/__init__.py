"""Renderers: pure functions from Settings to the config files of external programs.

Invariants:
    - No IO: every renderer returns text, cli.py writes it
"""
