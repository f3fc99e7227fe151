class CodedocError(Exception):
    """Base class for all codedoc errors."""


class NotFoundError(CodedocError, LookupError):
    """A needle that was expected in a haystack could not be located."""

    def __init__(self, needle: str, haystack: str):
        self.needle = needle
        self.haystack = haystack
        super().__init__(f"target `{needle}` not found in `{haystack[:80]}`")


class FetchError(CodedocError):
    """The document source could not produce a document."""


class SubmissionError(CodedocError):
    """A batch of edit requests could not be applied."""


class FormatError(CodedocError):
    """An external formatter rejected the code or could not be run."""
