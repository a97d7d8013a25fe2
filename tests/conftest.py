"""
Pytest Configuration and Shared Fixtures

This module contains pytest configuration shared by every test suite.

Fixtures:
    - reset_container: Clears the cached service graph between tests
    - sample_catalog_data: Catalog with two models and a two-step app

Architecture Notes:
    - Unit tests never touch a real Redis or provider: stores and
      collaborators are replaced with in-memory fakes (tests/unit/conftest.py)
    - The composition root is reset after each test so patched factories
      never leak

Usage:
    def test_something(sample_catalog_data):
        catalog = JsonAppCatalog.from_dict(sample_catalog_data)
"""

import logging

import pytest

from src.shared import container

# Configure logger for tests
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def reset_container():
    """Drop cached services built by src.shared.container."""
    yield
    container.reset()


@pytest.fixture
def sample_catalog_data() -> dict:
    """
    Catalog used across suites.

    Models: flux-dev, real-esrgan, retired (inactive).
    Apps:
        - portrait-upscale: flux-dev, then real-esrgan after approval
        - two-step: flux-dev, then real-esrgan fed by step 0 output
        - broken: single step on an inactive model
    """
    return {
        "models": [
            {
                "slug": "flux-dev",
                "name": "Flux Dev",
                "provider_model_id": "black-forest-labs/flux-dev",
            },
            {
                "slug": "real-esrgan",
                "name": "Real-ESRGAN Upscaler",
                "provider_model_id": "nightmareai/real-esrgan",
            },
            {"slug": "retired", "name": "Retired", "is_active": False},
        ],
        "apps": [
            {
                "slug": "portrait-upscale",
                "name": "Portrait + Upscale",
                "steps": [
                    {
                        "model_slug": "flux-dev",
                        "config": {"subject": {"source": "user"}},
                        "prompt_template": "Studio portrait of {subject}",
                    },
                    {
                        "model_slug": "real-esrgan",
                        "requires_approval": True,
                        "config": {
                            "image": {"source": "previous", "step_index": 0}
                        },
                    },
                ],
            },
            {
                "slug": "two-step",
                "name": "Two Step",
                "steps": [
                    {
                        "model_slug": "flux-dev",
                        "config": {"prompt": {"source": "user"}},
                    },
                    {
                        "model_slug": "real-esrgan",
                        "config": {
                            "image": {"source": "previous", "step_index": 0},
                            "scale": {"source": "static", "value": 2},
                        },
                    },
                ],
            },
            {
                "slug": "broken",
                "name": "Broken",
                "steps": [{"model_slug": "retired"}],
            },
        ],
    }
