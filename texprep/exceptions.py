"""
Exception hierarchy for the texprep preprocessing core.

Only decoding can fail at runtime. Resizing, pyramid building and histogram
matching are total over well-formed buffers; precondition violations on those
paths surface as ``ValueError``.
"""


class TexPrepError(Exception):
    """
    Base exception for all texprep errors.

    Examples:
        >>> try:
        ...     buffer = load_image("example.png", RGB)
        ... except TexPrepError as e:
        ...     logger.error(f"Preprocessing failed: {e}")
    """

    pass


class DecodeError(TexPrepError):
    """
    Raised when an image source cannot be decoded.

    Common causes include:
    - Path does not exist or is not readable
    - Bytes are truncated or corrupt
    - Format not recognised by the decoder

    Notes:
        - The decoder's own exception is chained as ``__cause__``
        - Never retried here; retry policy belongs to the caller
    """

    pass
