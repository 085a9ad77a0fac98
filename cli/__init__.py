# -*- coding: utf-8 -*-
"""
Command-line entry points (run with `python -m cli.<name>`):

- run_navigation    : agent with limited sensing replans with D* Lite; CSV + optional PNGs
"""
__all__ = [
    "run_navigation",
]
