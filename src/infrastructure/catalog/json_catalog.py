"""
JSON App Catalog

Read-only implementation of AppCatalogProtocol loaded from a JSON file
(CATALOG_PATH, default "config/catalog.json").

File format:
    {
        "models": [
            {"slug": "flux-dev", "name": "Flux Dev",
             "provider_model_id": "black-forest-labs/flux-dev",
             "endpoint": "", "is_active": true}
        ],
        "apps": [
            {"slug": "portrait", "name": "Portrait", "description": "...",
             "steps": [{"model_slug": "flux-dev", "config": {...},
                        "prompt_template": "...", "requires_approval": false}]}
        ]
    }

Step indexes are taken from list order (0-based).
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from src.domain.generation.entities import AiModel, AppDefinition
from src.domain.shared.exceptions import AppNotFoundError, ModelNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = "config/catalog.json"


class JsonAppCatalog:
    """
    In-memory catalog of models and apps.

    Inactive entries are treated exactly like missing ones.

    Examples:
        >>> catalog = JsonAppCatalog.from_file("config/catalog.json")
        >>> catalog.get_model("flux-dev").name
        'Flux Dev'
    """

    def __init__(
        self,
        models: Iterable[AiModel] = (),
        apps: Iterable[AppDefinition] = (),
    ) -> None:
        self._models: dict[str, AiModel] = {model.slug: model for model in models}
        self._apps: dict[str, AppDefinition] = {app.slug: app for app in apps}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JsonAppCatalog":
        return cls(
            models=[AiModel.from_dict(item) for item in data.get("models") or []],
            apps=[AppDefinition.from_dict(item) for item in data.get("apps") or []],
        )

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> "JsonAppCatalog":
        """
        Load the catalog file.

        Raises:
            FileNotFoundError: If the file does not exist
            json.JSONDecodeError: If the file is not valid JSON
        """
        catalog_path = Path(path or os.getenv("CATALOG_PATH", DEFAULT_CATALOG_PATH))
        with catalog_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        catalog = cls.from_dict(data)
        logger.info(
            f"Loaded catalog from {catalog_path}: "
            f"{len(catalog._models)} models, {len(catalog._apps)} apps"
        )
        return catalog

    def find_model(self, slug: str) -> Optional[AiModel]:
        model = self._models.get(slug)
        return model if model is not None and model.is_active else None

    def get_model(self, slug: str) -> AiModel:
        model = self.find_model(slug)
        if model is None:
            raise ModelNotFoundError(slug)
        return model

    def find_app(self, slug: str) -> Optional[AppDefinition]:
        app = self._apps.get(slug)
        return app if app is not None and app.is_active else None

    def get_app(self, slug: str) -> AppDefinition:
        app = self.find_app(slug)
        if app is None:
            raise AppNotFoundError(slug)
        return app

    def active_models(self) -> list[AiModel]:
        return [model for model in self._models.values() if model.is_active]

    def active_apps(self) -> list[AppDefinition]:
        return [app for app in self._apps.values() if app.is_active]
