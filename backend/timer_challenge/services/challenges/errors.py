class ChallengeStateError(RuntimeError):
    """Raised when a challenge operation is invoked from a phase that does not allow it."""
