"""
Auxiliary window declarations.

A window block looks like:

    @NEW WINDOW {
    @Title = "Greeting"
    @Content = {
    TEXT = "Hello there"
    BUTTON = "Again": { print "clicked" }
    }
    }

The block body is hydrated into a WindowSpec and handed to the host. The
core does not retain it; a bound button keeps a closure back into the
interpreter so the host can run its single statement later.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional

TITLE_PATTERN = re.compile(r'@Title\s*=\s*"(.*?)"')
CONTENT_PATTERN = re.compile(r'@Content\s*=\s*\{')
TEXT_PATTERN = re.compile(r'TEXT\s*=\s*"(.*?)"')
BUTTON_PATTERN = re.compile(r'BUTTON\s*=\s*"(.*?)"\s*:\s*\{(.*?)\}', re.DOTALL)

DEFAULT_TITLE = "Window"


@dataclass
class WindowButton:
    """A window button bound to one statement."""
    label: str
    bound_statement: str
    action: Optional[Callable[[], None]] = field(default=None, compare=False, repr=False)

    def press(self) -> None:
        """Run the bound statement (no-op until the interpreter binds an action)."""
        if self.action is not None:
            self.action()


@dataclass
class WindowSpec:
    """Everything the host needs to present an auxiliary window."""
    title: str = DEFAULT_TITLE
    content: str = ""
    button: Optional[WindowButton] = None


def build_window_spec(body: List[str], default_title: str = DEFAULT_TITLE) -> WindowSpec:
    """
    Hydrate a window block body into a WindowSpec.

    Args:
        body: Lines between the opening and closing braces of the block
        default_title: Title used when the block has no @Title entry

    Returns:
        WindowSpec with title, content text and an unbound button, if any
    """
    full = "\n".join(body)
    spec = WindowSpec(title=default_title)

    title = TITLE_PATTERN.search(full)
    if title:
        spec.title = title.group(1).strip()

    content = CONTENT_PATTERN.search(full)
    if content is None:
        return spec

    # The content block runs to the first closing brace after it.
    block = full[content.end():]
    end = block.find("}")
    if end >= 0:
        inner = block[:end].strip()
        text = TEXT_PATTERN.search(inner)
        if text:
            spec.content = text.group(1).strip()

        button = BUTTON_PATTERN.search(full)
        if button:
            spec.button = WindowButton(
                label=button.group(1).strip(),
                bound_statement=button.group(2).strip(),
            )
    return spec


def extract_update_text(text: str) -> Optional[str]:
    """Text of the first TEXT = "..." entry, or None when absent."""
    match = TEXT_PATTERN.search(text)
    if match is None:
        return None
    return match.group(1).strip()
