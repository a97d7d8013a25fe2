"""
Generation Domain Services.

Available Services:
    - StepInputResolver: Builds step inputs from config, user inputs and history
"""

from src.domain.generation.services.input_resolver import StepInputResolver

__all__ = ["StepInputResolver"]
