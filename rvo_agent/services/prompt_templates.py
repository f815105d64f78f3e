"""Load and render the bundled prompt templates in ``rvo_agent/prompts``.

Templates are markdown files. Anything above the first ``---`` line is a
header for maintainers and is not sent to the model. Placeholders use the
``{{ name }}`` syntax.
"""

import re
from functools import lru_cache
from pathlib import Path

_PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"
_PLACEHOLDER = re.compile(r"{{\s*(\w+)\s*}}")


@lru_cache()
def load_prompt(name: str) -> str:
    """Load prompt template *name* (without ``.md``), header stripped."""
    path = _PROMPTS_DIR / f"{name}.md"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")
    template = path.read_text(encoding="utf-8")
    if "---" in template:
        template = template.split("---", 1)[-1]
    return template.strip()


def render_prompt(name: str, **values: object) -> str:
    """Render template *name*, substituting ``{{ key }}`` placeholders.

    Substitution is a single pass, so placeholder-like text inside a value
    (for example scraped page content) is left untouched. Unknown
    placeholders are kept verbatim.
    """
    template = load_prompt(name)
    return _PLACEHOLDER.sub(
        lambda m: str(values[m.group(1)]) if m.group(1) in values else m.group(0),
        template,
    )
