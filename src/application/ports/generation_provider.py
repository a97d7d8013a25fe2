"""
GenerationProvider Port

Contract for the external AI provider that turns a model + inputs into an
output payload. Implemented by HttpGenerationProvider (httpx).
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from src.domain.generation.entities import AiModel


@dataclass(frozen=True)
class ProviderResult:
    """
    Successful provider response.

    Attributes:
        output: Model-specific payload; "result" holds the primary result URL
        thumbnail_url: Optional preview image
        duration: Round-trip time in seconds
    """

    output: dict[str, Any] = field(default_factory=dict)
    thumbnail_url: Optional[str] = None
    duration: Optional[float] = None


class GenerationProviderProtocol(Protocol):
    def generate(self, model: AiModel, input_data: dict[str, Any]) -> ProviderResult:
        """
        Run the model synchronously.

        Raises:
            ProviderRequestError: Provider rejected the request or was unreachable
        """
        ...
