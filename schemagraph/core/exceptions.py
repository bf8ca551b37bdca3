"""Exception hierarchy for the schemagraph package."""


class SchemaGraphError(Exception):
    """Base exception for all schemagraph errors."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class UnresolvedSubjectError(SchemaGraphError):
    """Raised when no handler can build a schema for a union variant."""

    def __init__(self, subject, context: dict | None = None):
        super().__init__(
            f"No handler can build a schema for {subject!r}",
            context={"subject": describe_subject(subject), **(context or {})},
        )
        self.subject = subject


class HandlerError(SchemaGraphError):
    """Raised when a handler registration is invalid."""

    pass


class ConfigError(SchemaGraphError):
    """Raised when builder configuration loading or validation fails."""

    pass


class TargetError(SchemaGraphError):
    """Raised when a build target cannot be imported."""

    pass


def describe_subject(subject) -> str:
    name = getattr(subject, "__qualname__", None) or getattr(subject, "__name__", None)
    return name or repr(subject)
