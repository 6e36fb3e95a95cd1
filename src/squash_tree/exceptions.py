"""Exceptions raised by squash-tree."""


class SquashTreeError(Exception):
    """Base class for squash-tree failures."""

    pass


class RepoNotFound(SquashTreeError):
    """No git repository found from the working directory upward."""

    pass


class GitError(SquashTreeError):
    """A git subprocess call failed."""

    pass


class InvalidRef(SquashTreeError):
    """A ref could not be resolved to a commit."""

    def __init__(self, ref: str, reason: str = ""):
        self.ref = ref
        message = f"invalid ref '{ref}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InvalidFact(SquashTreeError):
    """A squash fact violates its invariants."""

    pass


class WriteFailure(SquashTreeError):
    """The notes store rejected a metadata write."""

    pass


class FlagError(SquashTreeError):
    """Required command arguments are missing."""

    pass
