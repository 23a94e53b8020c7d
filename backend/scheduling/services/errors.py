# backend/scheduling/services/errors.py


class InvalidRequest(ValueError):
    """Caller-supplied parameters are outside contractual bounds.

    Raised before any computation starts. HTTP handlers turn it into a 400.
    """
