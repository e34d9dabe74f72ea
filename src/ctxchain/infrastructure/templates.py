"""Jinja2 template loading with chain-aware variable lookup.

Templates see their render variables first.  A name that is not a
render variable is looked up on the active chain (passed under the
``__context`` variable) but only when some layer declares it as a view
helper::

    env = build_template_environment()
    render_string(env, ctx, "{{ greeting() }}, {{ user }}", user="ada")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    select_autoescape,
)
from jinja2.runtime import Context
from jinja2.utils import missing

from ctxchain.domain.context import BaseContext
from ctxchain.infrastructure.view_helpers import ViewHelperProxy

if TYPE_CHECKING:
    from jinja2 import Template

DEFAULT_CONTEXT_VARIABLE = "__context"


class ChainTemplateContext(Context):
    """Template context that falls back to the chain's view helpers."""

    def resolve_or_missing(self, key: str) -> Any:
        rv = super().resolve_or_missing(key)
        if rv is not missing:
            return rv
        chain = super().resolve_or_missing(self.environment.ctxchain_context_variable)
        if not isinstance(chain, BaseContext):
            return missing
        proxy = ViewHelperProxy(chain)
        if key not in proxy:
            return missing
        return getattr(proxy, key)


def build_template_environment(
    *,
    templates_dir: Path | None = None,
    context_variable: str = DEFAULT_CONTEXT_VARIABLE,
    autoescape: bool = True,
) -> Environment:
    """Build a Jinja2 environment with user templates before packaged ones.

    Args:
        templates_dir: Optional directory searched before the templates
            shipped with ctxchain.
        context_variable: Render variable that carries the active chain.
        autoescape: Escape ``.html``/``.xml`` templates and strings.
    """
    loaders: list[BaseLoader] = []
    if templates_dir is not None:
        loaders.append(FileSystemLoader(str(templates_dir)))
    loaders.append(PackageLoader("ctxchain", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        autoescape=select_autoescape(default_for_string=True) if autoescape else False,
    )
    env.context_class = ChainTemplateContext
    env.extend(ctxchain_context_variable=context_variable)
    return env


def _render(env: Environment, template: Template, context: BaseContext, variables: Any) -> str:
    return template.render({**variables, env.ctxchain_context_variable: context})


def render_template(env: Environment, context: BaseContext, name: str, **variables: Any) -> str:
    """Render the template *name* with *context* as the active chain."""
    return _render(env, env.get_template(name), context, variables)


def render_string(env: Environment, context: BaseContext, source: str, **variables: Any) -> str:
    """Render an inline template *source* with *context* as the active chain."""
    return _render(env, env.from_string(source), context, variables)


def render_debug_panel(env: Environment, context: BaseContext) -> str:
    """Render the packaged HTML panel listing *context*'s chain and owners."""
    owners: dict[str, list[str]] = {name: [] for name in context.context_class_chain}
    for method_name, owner in sorted(context.context_method_mapping.items()):
        owners.setdefault(owner, []).append(method_name)
    return render_template(
        env,
        context,
        "debug/chain.html.j2",
        chain=context.context_class_chain,
        owners=owners,
        helpers=sorted(
            name for name in context.context_method_mapping if context.has_view_helper(name)
        ),
    )
