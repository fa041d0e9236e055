"""OpenAI Chat Completions backend for story generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from diary_story.services.stories import StoryBackend


@dataclass
class OpenAIStoryBackend(StoryBackend):
    """Story backend backed by OpenAI Chat Completions."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIStoryBackend":
        """Create an OpenAI story backend."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete(
        self, *, model: str, prompt: str, max_tokens: int, temperature: float
    ) -> list[str]:
        """Request one completion and return the text of each choice."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return [choice.message.content or "" for choice in response.choices or []]
