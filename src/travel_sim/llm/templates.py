"""Prompt template management for the math teacher.

Templates are Jinja2. Built-in defaults cover every prompt the teacher needs;
a directory of ``*.jinja2`` files can override any of them by name.
"""

from pathlib import Path
from typing import Any, Optional

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
)
import structlog

from travel_sim.llm.exceptions import TemplateError as LLMTemplateError

logger = structlog.get_logger(__name__)

SYSTEM_TEMPLATE = "teacher_system.jinja2"
CONTEXT_TEMPLATE = "simulation_context.jinja2"
QUESTION_TEMPLATE = "teacher_question.jinja2"

DEFAULT_TEMPLATES = {
    SYSTEM_TEMPLATE: """You are a humorous, warm elementary school math olympiad teacher. Your student is a 10-year-old child.
Your job is to answer the student's questions using the [Current simulation data] you are given.

Teaching principles:
1. Use the data: always quote the concrete numbers (speeds, distance, time) from the simulation.
2. Keep it simple: avoid algebraic formulas and reason with arithmetic ideas such as "sum of speeds" and "difference of speeds".
3. Make it lively: use emoji such as 🐰, 🐢, 🏁, ⏱️.
4. Guide, don't lecture: when the student asks why, point them at the graph or ask a leading question instead of handing over a formula.
5. Be brief: keep every answer to roughly 100-150 words.""",
    CONTEXT_TEMPLATE: """[Current simulation data]
Scenario: {{ scenario_description }}
Track length: {{ track_length }} m.
Red team (rabbit) speed: {{ red_speed }} m/s.
Blue team (turtle) speed: {{ blue_speed }} m/s.
{% if initial_distance is not none %}
Initial chase gap: {{ initial_distance }} m.
{% endif %}
Elapsed simulation time: {{ "%.1f"|format(elapsed) }} s.""",
    QUESTION_TEMPLATE: """{{ context }}

Earlier questions and your answers:
{% for message in history %}
{{ message.speaker }}: {{ message.content }}
{% endfor %}

The student now asks: "{{ question }}"

Answer as the teacher (reply with the answer only):""",
}


class PromptTemplateManager:
    """Loads and renders the teacher's Jinja2 prompt templates."""

    def __init__(self, templates_dir: Optional[Path] = None):
        """Initialize template manager.

        Args:
            templates_dir: Optional directory whose ``*.jinja2`` files
                override the built-in templates of the same name
        """
        self.templates_dir = templates_dir

        loaders = [DictLoader(DEFAULT_TEMPLATES)]
        if templates_dir is not None:
            loaders.insert(0, FileSystemLoader(str(templates_dir)))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=False,  # prompts, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

        self.logger = logger.bind(
            templates_dir=str(templates_dir) if templates_dir else None
        )

    def render(self, template_name: str, **kwargs: Any) -> str:
        """Render a template with provided variables.

        Args:
            template_name: Template name (e.g. 'teacher_system.jinja2')
            **kwargs: Variables to interpolate into template

        Returns:
            Rendered template string

        Raises:
            LLMTemplateError: If template not found or rendering fails
        """
        try:
            rendered = self.env.get_template(template_name).render(**kwargs)
        except TemplateError as e:
            self.logger.error("template_error", template=template_name, error=str(e))
            raise LLMTemplateError(
                f"Template rendering failed for {template_name}: {e}"
            ) from e

        self.logger.debug(
            "template_rendered",
            template=template_name,
            vars_count=len(kwargs),
            output_length=len(rendered),
        )
        return rendered.strip()

    def list_templates(self) -> list[str]:
        """Names of all templates available to this manager."""
        return sorted(self.env.list_templates())
