"""
StepInputResolver Domain Service

Builds the input mapping for one app step from three sources: static values
in the step config, the user's execution inputs, and outputs of earlier
steps recorded in the execution history.

Resolution order:
    1. Fields listed in step.config, by their "source":
         static   -> config "value" (JSON strings starting with [ or { are decoded)
         user     -> inputs[config "input_key" or field name]
         previous -> history[config "step_index"].output[config "output_key" or "result"]
    2. ui_schema fields not resolved yet: user input of the same key, then "default"
    3. Prompt template tokens not resolved yet: user input of the same key
    4. prompt_template rendered into "prompt" by {token} substitution

Stateless and side-effect free apart from logging.
"""

import json
import logging
import re
from typing import Any, Iterable, Optional

from src.domain.generation.entities.app_definition import AppStep
from src.domain.generation.value_objects.step_result import StepResult

logger = logging.getLogger(__name__)

TEMPLATE_TOKEN_PATTERN = re.compile(r"\{([a-zA-Z0-9_]+)\}")
DEFAULT_OUTPUT_KEY = "result"


class StepInputResolver:
    """
    Resolves step inputs for the AppExecutionService.

    Examples:
        >>> step = AppStep(
        ...     index=1,
        ...     model_slug="upscaler",
        ...     config={
        ...         "image": {"source": "previous", "step_index": 0},
        ...         "scale": {"source": "static", "value": 2},
        ...     },
        ... )
        >>> history = [StepResult(0, GenerationStatus.COMPLETED, {"result": "https://x/0.png"})]
        >>> StepInputResolver().resolve(step, {}, history)
        {'image': 'https://x/0.png', 'scale': 2}
    """

    def resolve(
        self,
        step: AppStep,
        inputs: dict[str, Any],
        history: Iterable[StepResult],
    ) -> dict[str, Any]:
        inputs = inputs or {}
        results = {result.step_index: result for result in history}
        resolved: dict[str, Any] = {}

        for key, field_config in step.config.items():
            source = field_config.get("source", "user")
            if source == "static":
                resolved[key] = self._static_value(field_config.get("value"))
            elif source == "user":
                resolved[key] = inputs.get(field_config.get("input_key") or key)
            elif source == "previous":
                resolved[key] = self._previous_value(step, field_config, results)
            else:
                logger.warning(
                    f"Step {step.index}: unknown input source '{source}' for field '{key}'"
                )
                resolved[key] = None

        for ui_field in step.ui_schema:
            ui_key = ui_field.get("key")
            if not ui_key or ui_key in resolved:
                continue
            if ui_key in inputs:
                resolved[ui_key] = inputs[ui_key]
            elif "default" in ui_field:
                resolved[ui_key] = ui_field["default"]

        if step.prompt_template:
            for token in TEMPLATE_TOKEN_PATTERN.findall(step.prompt_template):
                if token not in resolved and token in inputs:
                    resolved[token] = inputs[token]
            resolved["prompt"] = self.render_prompt(step.prompt_template, resolved)

        logger.info(f"Step {step.index} resolved inputs: keys={sorted(resolved)}")
        return resolved

    @staticmethod
    def _static_value(value: Any) -> Any:
        if isinstance(value, str) and value[:1] in ("[", "{"):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return value

    @staticmethod
    def _previous_value(
        step: AppStep,
        field_config: dict[str, Any],
        results: dict[int, StepResult],
    ) -> Optional[Any]:
        step_index = field_config.get("step_index")
        output_key = field_config.get("output_key") or DEFAULT_OUTPUT_KEY
        result = results.get(int(step_index)) if step_index is not None else None
        if result is None:
            logger.warning(
                f"Step {step.index}: missing history for step {step_index}"
            )
            return None
        return result.get(output_key)

    @staticmethod
    def render_prompt(template: str, values: dict[str, Any]) -> str:
        """
        Substitute {key} tokens with resolved values.

        Lists are joined with ", " (mapping items contribute their "file_uri",
        or their JSON form); None renders as an empty string. Tokens without
        a value are left in place.
        """
        prompt = template
        for key, value in values.items():
            prompt = prompt.replace("{" + key + "}", _as_prompt_text(value))
        return prompt


def _as_prompt_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(_as_prompt_item(item) for item in value)
    return _as_prompt_item(value)


def _as_prompt_item(item: Any) -> str:
    if isinstance(item, dict):
        return item.get("file_uri") or json.dumps(item)
    if item is None:
        return ""
    return str(item)
