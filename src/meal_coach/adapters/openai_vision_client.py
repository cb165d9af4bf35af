"""OpenAI Responses API client for nutrition extraction."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from meal_coach.services.vision import VisionClient, VisionExtractionError


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, client: AsyncOpenAI) -> "OpenAIVisionClient":
        """Create a vision client sharing an OpenAI session."""
        return cls(client=client)

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "nutrition_analysis",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise VisionExtractionError("OpenAI returned an empty response")
        try:
            return json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise VisionExtractionError("OpenAI returned malformed JSON") from exc
