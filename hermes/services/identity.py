"""Rules deciding whether two listeners count as the same subscription."""

from __future__ import annotations

import ast
import inspect
import textwrap
from typing import Any, Callable

from hermes.domain.models import IdentityRule

ListenerMatcher = Callable[[Callable[..., Any], Callable[..., Any]], bool]


def same_reference(first: Callable[..., Any], second: Callable[..., Any]) -> bool:
    """Equality of the listener values themselves.

    Uses ``==`` rather than ``is`` so that two bound-method objects created
    from the same instance and function compare as one listener.
    """
    return first is second or first == second


def _source_of(listener: Callable[..., Any]) -> str | None:
    try:
        source = textwrap.dedent(inspect.getsource(listener))
    except (OSError, TypeError):
        return None
    if getattr(listener, "__name__", None) == "<lambda>":
        return _lambda_text(source)
    return source


def _lambda_text(source: str) -> str | None:
    """Cut a lambda's own text out of the lines ``getsource`` returned.

    ``None`` when the lines do not parse or hold more than one lambda, since
    the listener's own text cannot be told apart then.
    """
    try:
        tree = ast.parse(source)
    except SyntaxError:
        return None
    lambdas = [node for node in ast.walk(tree) if isinstance(node, ast.Lambda)]
    if len(lambdas) != 1:
        return None
    return ast.get_source_segment(source, lambdas[0])


def same_structure(first: Callable[..., Any], second: Callable[..., Any]) -> bool:
    """Textual comparison of the listeners' source code.

    Closures produced by one factory share their source and therefore
    collide. Listeners without retrievable source (builtins, partials,
    code typed into a REPL, lambdas sharing a line with another lambda)
    fall back to ``same_reference``.
    """
    if same_reference(first, second):
        return True
    first_source = _source_of(first)
    if first_source is None:
        return False
    return first_source == _source_of(second)


_MATCHERS: dict[IdentityRule, ListenerMatcher] = {
    IdentityRule.REFERENCE: same_reference,
    IdentityRule.STRUCTURAL: same_structure,
}


def matcher_for(rule: IdentityRule | str) -> ListenerMatcher:
    """Return the comparison function for *rule*."""
    return _MATCHERS[IdentityRule(rule)]
