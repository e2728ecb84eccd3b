"""Single check used by every stage contract."""

from scalemask.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Raise :class:`ContractViolation` with ``message`` unless ``condition`` holds.

    Examples
    --------
    >>> require(len(tables) > 0, "Calibration contract: empty color table")
    """
    if not condition:
        raise ContractViolation(message)
