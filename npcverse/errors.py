"""Exceptions raised at the npcverse call boundary.

Lookups of unknown ids never raise; they return ``None`` (or a "not found"
interaction result). These exceptions cover inputs that indicate a caller bug.
"""


class NPCVerseError(Exception):
    """Base class for all npcverse errors."""


class InvalidInputError(NPCVerseError, ValueError):
    """Raised when a numeric or enum input is outside its valid domain.

    Examples: a negative or non-finite player contribution, a negative team
    size, an interaction name that does not match any InteractionType.
    """

    def __init__(self, *, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value!r}: {reason}")


class UnknownAgentError(NPCVerseError, KeyError):
    """Raised when a project is started with member ids missing from the directory."""

    def __init__(self, agent_ids: list[str]) -> None:
        self.agent_ids = agent_ids
        super().__init__(f"Unknown agent id(s): {', '.join(agent_ids)}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]
