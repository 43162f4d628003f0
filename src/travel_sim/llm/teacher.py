"""LLM-backed math teacher that explains the running simulation.

The teacher is an external collaborator of the simulation: it only reads the
scenario, parameters and elapsed time, and any provider failure is turned into
a friendly fallback message instead of an exception.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import structlog

from travel_sim.llm.base import BaseLLMProvider
from travel_sim.llm.chat_session import ChatSession
from travel_sim.llm.exceptions import LLMError, TemplateError
from travel_sim.llm.templates import (
    CONTEXT_TEMPLATE,
    QUESTION_TEMPLATE,
    SYSTEM_TEMPLATE,
    PromptTemplateManager,
)
from travel_sim.simulation.core.config import SimulationConfig
from travel_sim.simulation.core.scenario import ScenarioType
from travel_sim.simulation.engine.driver import SimulationSnapshot

logger = structlog.get_logger(__name__)

HISTORY_WINDOW = 4

FALLBACK_EMPTY = "The teacher is still thinking about the simplest way to explain this, hang on a moment..."
FALLBACK_ERROR = "The teacher's connection is a bit slow right now, please ask again!"
FALLBACK_UNAVAILABLE = "The AI teacher is not available. Ask a grown-up to set up an API key."

EXPLAIN_QUESTION = (
    "Teacher, please walk me through the motion we are watching right now. "
    "What math pattern should I pay attention to?"
)

SCENARIO_DESCRIPTIONS = {
    ScenarioType.LINEAR_MEET: "Classic meeting problem (straight track, starting face to face).",
    ScenarioType.LINEAR_CHASE: "Chase problem (straight track, same direction, red chases blue).",
    ScenarioType.ROUND_TRIP: "Repeated round-trip meetings (running back and forth between both ends).",
    ScenarioType.CIRCULAR: "Circular track problem (closed loop, the faster runner may lap the slower).",
}


def _format_number(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class SimulationContext:
    """What the teacher knows about the simulation.

    Attributes:
        scenario: Active scenario
        config: Active simulation parameters
        elapsed: Simulated seconds since reset
    """

    scenario: ScenarioType
    config: SimulationConfig
    elapsed: float = 0.0

    @classmethod
    def from_snapshot(cls, snapshot: SimulationSnapshot) -> "SimulationContext":
        """Build the context from committed driver state."""
        return cls(scenario=snapshot.scenario, config=snapshot.config, elapsed=snapshot.elapsed)


class MathTeacher:
    """Answer student questions about the current simulation."""

    def __init__(
        self,
        provider: Optional[BaseLLMProvider],
        templates: Optional[PromptTemplateManager] = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the teacher.

        Args:
            provider: LLM provider, or None when no provider is configured
            templates: Prompt template manager
            timeout: Seconds to wait for a reply before falling back
        """
        self.provider = provider
        self.templates = templates or PromptTemplateManager()
        self.timeout = timeout
        self.logger = logger.bind(provider=provider.name if provider else None)

    def system_prompt(self) -> str:
        """Teacher persona and teaching principles."""
        return self.templates.render(SYSTEM_TEMPLATE)

    def context_prompt(self, context: SimulationContext) -> str:
        """Describe the current simulation state."""
        config = context.config
        initial_distance = (
            _format_number(config.initial_distance)
            if context.scenario == ScenarioType.LINEAR_CHASE
            else None
        )
        return self.templates.render(
            CONTEXT_TEMPLATE,
            scenario_description=SCENARIO_DESCRIPTIONS[context.scenario],
            track_length=_format_number(config.track_length),
            red_speed=_format_number(config.red_speed),
            blue_speed=_format_number(config.blue_speed),
            initial_distance=initial_distance,
            elapsed=context.elapsed,
        )

    def build_prompt(
        self, question: str, session: ChatSession, context: SimulationContext
    ) -> str:
        """Full user prompt: latest context, recent transcript, question."""
        return self.templates.render(
            QUESTION_TEMPLATE,
            context=self.context_prompt(context),
            history=session.recent(HISTORY_WINDOW),
            question=question,
        )

    async def ask(
        self, question: str, session: ChatSession, context: SimulationContext
    ) -> str:
        """Ask the teacher a question.

        The question and the reply (or the fallback) are appended to the
        session. Provider and template failures turn into fallback replies.

        Args:
            question: Student's question
            session: Rolling transcript
            context: Current simulation context

        Returns:
            Teacher reply or a fallback message

        Raises:
            ValueError: If the question is blank
        """
        question = question.strip()
        if not question:
            raise ValueError("Question must be non-empty")

        # history for the prompt excludes the question being asked
        try:
            prompt = self.build_prompt(question, session, context)
        except TemplateError as e:
            self.logger.error("teacher_prompt_failed", error=str(e))
            reply = FALLBACK_ERROR
        else:
            reply = await self._generate(prompt)

        session.add_message("user", question)
        session.add_message("assistant", reply)
        return reply

    async def explain_scenario(self, session: ChatSession, context: SimulationContext) -> str:
        """Ask the teacher to explain the scene currently on screen."""
        return await self.ask(EXPLAIN_QUESTION, session, context)

    async def _generate(self, prompt: str) -> str:
        if self.provider is None:
            return FALLBACK_UNAVAILABLE

        try:
            response = await asyncio.wait_for(
                self.provider.generate(prompt=prompt, system_prompt=self.system_prompt()),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            self.logger.warning("teacher_request_timed_out", timeout=self.timeout)
            return FALLBACK_ERROR
        except LLMError as e:
            self.logger.error(
                "teacher_request_failed",
                error=str(e),
                error_type=type(e).__name__,
                failed_provider=e.provider,
                transient=e.transient,
            )
            return FALLBACK_ERROR

        if response.is_empty:
            return FALLBACK_EMPTY

        self.logger.info(
            "teacher_replied",
            tokens=response.total_tokens,
            cost=response.estimated_cost,
        )
        return response.content.strip()
