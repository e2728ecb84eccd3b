"""Exception raised when a pipeline stage breaks its own guarantees."""


class ContractViolation(RuntimeError):
    """A stage produced output that violates its contract.

    Signals a bug in the pipeline, never bad input:
    - ValueError / ValidationError: rejected configuration (Pydantic)
    - ScalemaskError: a legend row or a single image could not be handled
    - ContractViolation: calibration tables or an overlay grid are malformed
    """
