"""Failures raised while turning content into a quiz."""


class QuizGenerationError(Exception):
    """Base class for every quiz-creation failure."""
    pass


class EmptyContentError(QuizGenerationError):
    """Raised when the source content is empty or whitespace-only."""
    pass


class QuizParseError(QuizGenerationError):
    """Raised when neither the JSON nor the line-template reading of a response works."""
    pass


class QuizStructureError(QuizGenerationError):
    """Raised when a parsed quiz has the wrong answer count or a stray correct answer."""
    pass


class QuizSemanticError(QuizGenerationError):
    """Raised for duplicate, empty, oversized, catch-all, or ungrounded answers."""
    pass


class UpstreamModelError(QuizGenerationError):
    """Raised when the model client itself fails. The original error is chained."""
    pass
