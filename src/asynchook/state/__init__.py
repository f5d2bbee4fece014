"""State/sequencing layer.

This package decides which fetch completions may touch the exposed state
and owns the reduced application state of a single hook.
"""
