class FormatError(Exception):
    """
    raised when an input record cannot be used by pairfq
    """
    pass


class UnrecognizedHeaderError(FormatError):
    """
    raised when a header carries no pair information, neither a /1 /2 suffix on the
    name nor a leading pair digit on the comment (ex. 'name 1:N:0:ACGT')
    """
    pass


class InvalidRecordError(FormatError):
    """
    raised when a record contains the reserved separator character
    """
    pass


class TruncatedRecordError(FormatError):
    """
    raised (in strict quality mode) when the input ends before the quality of the last
    record reaches the length of its sequence
    """
    pass


class UnmatchedRecordError(Exception):
    """
    raised (in strict mode) for a record that has no mate or cannot be assigned to the
    forward or reverse output
    """
    pass


class PairNumberError(ValueError):
    pass
