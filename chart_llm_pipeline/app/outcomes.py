"""
Result and failure types shared by the pipeline stages.

Rationale:
- Gateway and parsing problems are ordinary values, not exceptions: the pipeline
  inspects them and switches to the fallback analysis.
- Only RenderFailure is raised, since there is no image to fall back to.
"""

from dataclasses import dataclass

from .schemas import ChartAnalysis


@dataclass(frozen=True)
class LLMFailure:
    detail: str = ""

    @property
    def kind(self) -> str:
        return type(self).__name__


class NotConfigured(LLMFailure):
    """No API credential; no request was attempted."""


class TransportError(LLMFailure):
    """Network error, timeout, non-2xx status or an unreadable envelope."""


class EmptyResponse(LLMFailure):
    """The envelope was valid but carried no usable content."""


@dataclass(frozen=True)
class ParseFailure:
    reason: str


@dataclass(frozen=True)
class Ok:
    analysis: ChartAnalysis


@dataclass(frozen=True)
class NeedsFallback:
    reason: str


class RenderFailure(RuntimeError):
    pass
