"""Interactive input collection.

Thin adapter between the terminal and the run: everything here only reads
answers and turns them into configuration values.
"""

import dataclasses
from typing import Any, Callable, Optional

from ..config import ConfigError, Destination, TransferMethod
from ..transfer import Transport

PromptFunc = Callable[..., str]

DESTINATION_PROMPTS = [
    ("user", "Username (e.g., root)"),
    ("host", "Remote host (IP/hostname)"),
    ("path", "Remote path (e.g., /mnt/backups)"),
]

CONFIRM_MESSAGE = "Backup is complete. Continue with disk extension? [y/N]: "
EXTEND_ONLY_MESSAGE = "Extend the root filesystem now? [y/N]: "


def _prompt(message: str, default: Optional[str] = None) -> str:
    """Read one answer, falling back to ``default`` on empty input.

    Raises:
        KeyboardInterrupt: On EOF or Ctrl-C
    """
    suffix = f" [{default}]" if default else ""
    try:
        answer = input(f"{message}{suffix}: ").strip()
    except EOFError:
        raise KeyboardInterrupt
    return answer or (default or "")


def _prompt_required(message: str, prompt: PromptFunc = _prompt) -> str:
    value = prompt(message)
    if not value:
        raise ConfigError(f"A value is required: {message}")
    return value


def prompt_method(prompt: PromptFunc = _prompt) -> TransferMethod:
    """Show the transfer method menu and resolve the choice.

    Raises:
        ConfigError: If the answer is not one of the listed methods
    """
    methods = list(TransferMethod)
    print("")
    print("=== Select transfer method ===")
    for method in methods:
        print(f"{method.selector}: {method.label}")
    answer = prompt(f"Enter your choice (1-{len(methods)})")
    return TransferMethod.from_selector(answer)


def collect_destination(
    defaults: dict[str, Any], prompt: PromptFunc = _prompt
) -> Destination:
    """Build the Destination, prompting for whatever ``defaults`` lacks."""
    values = dict(defaults)
    missing = [item for item in DESTINATION_PROMPTS if not values.get(item[0])]
    if missing:
        print("")
        print("=== Backup destination info ===")
    for name, message in missing:
        values[name] = _prompt_required(message, prompt)

    if values.get("method"):
        values["method"] = TransferMethod.from_selector(values["method"])
    else:
        values["method"] = prompt_method(prompt)

    return Destination(**values)


def collect_extra_fields(
    transport: Transport, destination: Destination, prompt: PromptFunc = _prompt
) -> Destination:
    """Ask for the fields only the chosen transport needs."""
    updates = {}
    for name in transport.missing_fields(destination):
        updates[name] = _prompt_required(transport.extra_prompts[name], prompt)
    if not updates:
        return destination
    return dataclasses.replace(destination, **updates)


def confirm_extension(message: str = CONFIRM_MESSAGE) -> bool:
    """Ask before touching partitions; only ``y`` or ``Y`` proceeds."""
    try:
        answer = input(message)
    except EOFError:
        return False
    return answer in ("y", "Y")
