"""
HTTP Generation Provider

httpx client for the AI provider API. Implements GenerationProviderProtocol.

Request:
    POST {model.endpoint or PROVIDER_BASE_URL + "/predictions"}
    Authorization: Bearer PROVIDER_API_TOKEN
    {"model": model.provider_model_id, "input": {...}}

Response (2xx):
    {"status": "succeeded", "output": "https://..." | ["https://...", ...],
     "thumbnail_url": "https://..." (optional)}

The first output URL becomes output["result"]; a list output is also kept
under output["outputs"]. A "failed" status, a non-2xx answer, a transport
error or an empty output raise ProviderRequestError carrying the request
body and, when there is one, the response body.
"""

import logging
import os
import time
from typing import Any, Optional

import httpx

from src.application.ports.generation_provider import ProviderResult
from src.domain.generation.entities import AiModel
from src.domain.shared.exceptions import ProviderRequestError

logger = logging.getLogger(__name__)


class HttpGenerationProvider:
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = (
            base_url or os.getenv("PROVIDER_BASE_URL", "http://localhost:9000/v1")
        ).rstrip("/")
        self.api_token = api_token or os.getenv("PROVIDER_API_TOKEN", "")
        self.timeout = timeout or float(os.getenv("PROVIDER_TIMEOUT", "120"))
        self.client = client

    def _endpoint_for(self, model: AiModel) -> str:
        return model.endpoint or f"{self.base_url}/predictions"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def generate(self, model: AiModel, input_data: dict[str, Any]) -> ProviderResult:
        """
        Run the model and wait for its answer.

        Raises:
            ProviderRequestError: Provider unreachable, rejected the request,
                reported a failure or returned no output
        """
        payload = {"model": model.provider_model_id, "input": input_data}
        endpoint = self._endpoint_for(model)
        start = time.perf_counter()

        try:
            if self.client is not None:
                response = self.client.post(
                    endpoint, headers=self._headers(), json=payload
                )
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(
                        endpoint, headers=self._headers(), json=payload
                    )
        except httpx.RequestError as e:
            raise ProviderRequestError(
                f"Provider request failed: {e}", request_body=payload
            ) from e

        duration = time.perf_counter() - start

        if not response.is_success:
            logger.error(
                f"Provider error for model '{model.slug}': "
                f"{response.status_code} {response.text[:500]}"
            )
            raise ProviderRequestError(
                f"Provider API error: {response.status_code}",
                request_body=payload,
                response_body=response.text,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderRequestError(
                "Provider returned invalid JSON",
                request_body=payload,
                response_body=response.text,
                status_code=response.status_code,
            ) from e

        if body.get("status") == "failed":
            raise ProviderRequestError(
                f"Provider generation failed: {body.get('error') or 'Unknown error'}",
                request_body=payload,
                response_body=response.text,
                status_code=response.status_code,
            )

        output = self._build_output(body.get("output"))
        if output.get("result") is None:
            raise ProviderRequestError(
                "Provider returned no content",
                request_body=payload,
                response_body=response.text,
                status_code=response.status_code,
            )

        logger.info(f"Provider answered for model '{model.slug}' in {duration:.2f}s")
        return ProviderResult(
            output=output,
            thumbnail_url=body.get("thumbnail_url"),
            duration=round(duration, 3),
        )

    @staticmethod
    def _build_output(raw_output: Any) -> dict[str, Any]:
        if isinstance(raw_output, list):
            urls = [item for item in raw_output if item]
            return {"result": urls[0] if urls else None, "outputs": urls}
        if isinstance(raw_output, dict):
            output = dict(raw_output)
            output.setdefault("result", raw_output.get("url"))
            return output
        return {"result": raw_output or None}
