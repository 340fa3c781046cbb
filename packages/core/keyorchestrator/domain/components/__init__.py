"""Domain components.

Import from the submodules directly; model modules register their variants
on ``polymorphic_decoder`` at import time.
"""
