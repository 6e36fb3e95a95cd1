"""
squash-tree - See which commits were folded into a squash.

Records squash metadata as git notes while you rebase, amend or squash-merge,
and renders the composition history of any commit as a tree, including
squashes of squashes.
"""

__version__ = "0.1.0"
