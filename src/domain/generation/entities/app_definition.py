"""
App Catalog Entities.

Read-only definitions loaded from the catalog: the AI models that can run a
generation, and the multi-step apps that chain them.

Step input config format (AppStep.config):
    {
        "prompt":   {"source": "user", "input_key": "prompt"},
        "image":    {"source": "previous", "step_index": 0, "output_key": "result"},
        "strength": {"source": "static", "value": 0.7},
    }
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class AiModel:
    """
    AI model available for generations.

    Attributes:
        slug: Public identifier used in URLs (/api/models/{slug}/generate)
        name: Display name
        provider_model_id: Identifier sent to the provider API
        endpoint: Provider endpoint URL (empty string uses the default)
        is_active: Inactive models are treated as missing
    """

    slug: str
    name: str
    provider_model_id: str = ""
    endpoint: str = ""
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AiModel":
        return cls(
            slug=data["slug"],
            name=data.get("name") or data["slug"],
            provider_model_id=data.get("provider_model_id") or data["slug"],
            endpoint=data.get("endpoint") or "",
            is_active=bool(data.get("is_active", True)),
        )


@dataclass(frozen=True)
class AppStep:
    """
    One step of an app: which model runs and how its inputs are built.

    Attributes:
        index: Position in the app (0-based)
        name: Display name of the step
        model_slug: Model that runs this step
        config: Field name -> input source mapping (see module docstring)
        prompt_template: Optional template with {token} placeholders
        ui_schema: Form fields [{"key": ..., "default": ...}] used as fallbacks
        requires_approval: Pause the execution before running this step
    """

    index: int
    model_slug: str
    name: str = ""
    config: dict[str, dict[str, Any]] = field(default_factory=dict)
    prompt_template: Optional[str] = None
    ui_schema: list[dict[str, Any]] = field(default_factory=list)
    requires_approval: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any], index: int) -> "AppStep":
        return cls(
            index=index,
            model_slug=data["model_slug"],
            name=data.get("name") or f"Step {index + 1}",
            config=data.get("config") or {},
            prompt_template=data.get("prompt_template"),
            ui_schema=list(data.get("ui_schema") or []),
            requires_approval=bool(data.get("requires_approval", False)),
        )


@dataclass(frozen=True)
class AppDefinition:
    """
    Multi-step app: an ordered list of steps executed one after another.

    Examples:
        >>> app = AppDefinition(
        ...     slug="portrait",
        ...     name="Portrait",
        ...     steps=(AppStep(index=0, model_slug="flux-dev"),),
        ... )
        >>> app.step_at(0).model_slug
        'flux-dev'
        >>> app.step_at(1) is None
        True
    """

    slug: str
    name: str
    steps: tuple[AppStep, ...] = ()
    description: str = ""
    is_active: bool = True

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def step_at(self, index: int) -> Optional[AppStep]:
        if 0 <= index < len(self.steps):
            return self.steps[index]
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppDefinition":
        steps = tuple(
            AppStep.from_dict(step, index)
            for index, step in enumerate(data.get("steps") or [])
        )
        return cls(
            slug=data["slug"],
            name=data.get("name") or data["slug"],
            steps=steps,
            description=data.get("description") or "",
            is_active=bool(data.get("is_active", True)),
        )
