"""OpenAI Responses API client for motivational scripts."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from meal_coach.services.video import ScriptClient, VideoGenerationError


@dataclass
class OpenAIScriptClient(ScriptClient):
    """Script writer backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    temperature: float = 1.0
    max_output_tokens: int = 1024

    async def write(self, instructions: str, prompt: str) -> str:
        """Generate script text from a system prompt."""
        response = await self.client.responses.create(
            model=self.model,
            instructions=instructions,
            input=prompt,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
        script = (response.output_text or "").strip()
        if not script:
            raise VideoGenerationError("OpenAI returned an empty script")
        return script
