class CalcError(Exception):
    """Base for every error that fails a single input line or the session setup."""
