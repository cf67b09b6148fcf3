"""Answer resolution: turning a definition's variables into a context.

Variables are asked strictly in declaration order.  Each answer is stored
before the next variable is considered because later ``only_if`` conditions
look it up.
"""

from __future__ import annotations

from typing import Any

from ..definition import TemplateDefinition, Variable, value_tag, values_equal
from ..errors import InvalidAnswerError, UnsupportedVariableTypeError
from ..prompt import Prompter


def should_ask(variable: Variable, context: dict[str, Any]) -> bool:
    """Return ``True`` if *variable*'s ``only_if`` condition holds.

    A condition on a name missing from *context* (because that variable was
    itself skipped) does not hold.
    """
    condition = variable.only_if
    if condition is None:
        return True
    if condition.name not in context:
        return False
    return values_equal(context[condition.name], condition.value)


def ask_variable(variable: Variable, prompter: Prompter) -> Any:
    """Ask the question for a single variable and return the typed answer.

    Raises:
        UnsupportedVariableTypeError: If the default is not a bool, string or
            integer.
        InvalidAnswerError: If the prompter picks something outside
            ``choices``.
    """
    default = variable.default
    tag = value_tag(default)
    if tag is None:
        raise UnsupportedVariableTypeError(variable.name, default)

    if variable.choices is not None:
        answer = prompter.ask_choice(variable.prompt, default, list(variable.choices))
        if not any(values_equal(answer, choice) for choice in variable.choices):
            raise InvalidAnswerError(variable.name, answer, variable.choices)
        return answer

    if tag is bool:
        return bool(prompter.ask_boolean(variable.prompt, default))
    if tag is str:
        return str(prompter.ask_string(variable.prompt, default, variable.validation_pattern))
    return int(prompter.ask_integer(variable.prompt, default))


def resolve_answers(definition: TemplateDefinition, prompter: Prompter) -> dict[str, Any]:
    """Ask every applicable question of *definition* and return the context.

    The returned dict holds one entry per variable that was not skipped, in
    declaration order.  No filesystem access happens here.
    """
    context: dict[str, Any] = {}
    for variable in definition.variables:
        if not should_ask(variable, context):
            continue
        context[variable.name] = ask_variable(variable, prompter)
    return context
