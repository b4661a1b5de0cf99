"""Status bar menus."""
from typing import Iterable

from rich.text import Text

from composedash.core.registry import Container
from composedash.core.runner import Verb

# Column ranges kept from classic `docker ps` output (drops IMAGE and CREATED)
PS_COLUMNS = (slice(0, 20), slice(56, 79), slice(99, None))


def _option(prefix, key, suffix):
    return Text.assemble(prefix, ("(", "cyan"), (str(key), "magenta"), (")", "cyan"), suffix)


def main_menu() -> Text:
    options = [
        _option("", "r", "estart container"),
        _option("", "s", "top container"),
        _option("s", "t", "art container"),
        _option("", "p", "rocess list"),
        _option("bui", "l", "d container"),
        _option("re", "m", "ove container"),
        _option("", "k", "ill container"),
        _option("", "q", "uit"),
    ]
    return Text.assemble("Commands:\n", Text(", ").join(options), "\n", style="white")


def back_menu() -> Text:
    return Text.assemble("Commands: ", _option("", "b", "ack to main menu"), "\n", style="white")


def container_menu(verb: Verb, containers: Iterable[Container]) -> Text:
    choices = [_option("", c.index, c.name) for c in containers]
    choices.append(_option("", "b", "ack to main menu"))
    return Text.assemble(
        f"Which container do you want to {verb.value}?\n",
        Text(", ").join(choices),
        "\n",
        style="white",
    )


def trim_process_list(output: str) -> str:
    lines = []
    for line in output.splitlines():
        lines.append("".join(line[columns] for columns in PS_COLUMNS))
    return "\n".join(lines)


def process_list_menu(output: str) -> Text:
    return Text(trim_process_list(output) + "\n", style="magenta")


def process_list_error(output: str, exit_code: int) -> Text:
    message = output.strip() or f"process list exited with code {exit_code}"
    return Text(message + "\n", style="red")
