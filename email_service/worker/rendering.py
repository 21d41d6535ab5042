"""Template rendering for email subjects and bodies.

Templates use ``{{variable}}`` placeholders and are compiled with Jinja2.
Output is HTML-escaped by the engine and evaluation runs in Jinja2's sandbox;
nothing else is sanitised.
"""

import logging
from typing import Any, Mapping

from django.utils.html import strip_tags
from jinja2.sandbox import SandboxedEnvironment

from .exceptions import RenderError

logger = logging.getLogger(__name__)


class TemplateRenderer:
    def __init__(self, autoescape: bool = True):
        # Template text is remote input; underscore and unsafe attribute access is blocked
        self.env = SandboxedEnvironment(autoescape=autoescape)

    def render(self, template: str, data: Mapping[str, Any]) -> str:
        """Compile ``template`` and evaluate it against ``data``.

        Raises:
            RenderError: if the template is malformed or fails to evaluate.
        """
        try:
            compiled = self.env.from_string(template or "")
            return compiled.render(dict(data or {}))
        except Exception as e:
            logger.error(f"Template rendering failed: {e}")
            raise RenderError("Failed to render email template") from e


def html_to_text(html: str) -> str:
    # Plain-text alternative for transports that want one
    return strip_tags(html)
