import logging

from opentelemetry.trace import get_current_span, get_tracer
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError, ModelHTTPError

from stepchat.core.errors import RateLimitedError, TextGenerationError
from stepchat.core.retry import TOO_MANY_REQUESTS
from stepchat.core.settings import Settings


class PydanticAITextGenerator:
    def __init__(self, agent: Agent[None, str]) -> None:
        self.agent = agent

    @classmethod
    def from_settings(cls, settings: Settings) -> "PydanticAITextGenerator":
        agent = Agent(
            model=settings.TEXT_GENERATION_MODEL,
            name="Text Generator",
            output_type=str,
            defer_model_check=True,
        )
        return cls(agent)

    @get_tracer(__name__).start_as_current_span("generate_text")
    async def generate(self, instruction: str) -> str:
        span = get_current_span()
        span.set_attribute("instruction.length", len(instruction))
        try:
            result = await self.agent.run(instruction)
        except ModelHTTPError as exc:
            span.set_attribute("http.status_code", exc.status_code)
            if exc.status_code == TOO_MANY_REQUESTS:
                raise RateLimitedError(f"{exc.model_name} answered with too many requests") from exc
            logging.error(f"Text generation failed with HTTP {exc.status_code} from {exc.model_name}: {exc.body}")
            raise TextGenerationError(
                f"{exc.model_name} answered with HTTP {exc.status_code}", status_code=exc.status_code
            ) from exc
        except AgentRunError as exc:
            logging.error(f"Text generation failed: {exc}")
            raise TextGenerationError(str(exc)) from exc
        return result.output
