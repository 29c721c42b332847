"""Domain exceptions for proxy configuration, resolution and launch diagnostics."""

from __future__ import annotations


class ProxyStageError(RuntimeError):
    """Raised when a specific proxy stage fails fatally."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped proxy error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class SelfPretendError(ProxyStageError):
    """Raised when a bare override names the running proxy itself.

    The detail is intentionally empty: the condition stops resolution without
    a user-facing explanation.
    """

    def __init__(self) -> None:
        """Initialize the silent self-pretend sentinel."""

        super().__init__(stage="resolve", detail="")
