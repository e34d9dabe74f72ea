"""Tests for the chain-aware Jinja2 environment."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import Environment, TemplateNotFound, UndefinedError

from ctxchain import BaseContext
from ctxchain.infrastructure.templates import (
    build_template_environment,
    render_debug_panel,
    render_string,
    render_template,
)
from tests.sample_contexts import build_chain, build_root


@pytest.fixture
def env() -> Environment:
    return build_template_environment()


class TestRenderString:
    def test_view_helpers_are_visible(self, env: Environment) -> None:
        assert render_string(env, build_root(), "{{ greet() }} / {{ farewell() }}") == "hi / bye"

    def test_helpers_use_decorated_value(self, env: Environment) -> None:
        assert render_string(env, build_chain(), "{{ greet() }}") == "HI!"

    def test_render_variables_win(self, env: Environment) -> None:
        assert render_string(env, build_root(), "{{ greet }}", greet="override") == "override"

    def test_non_helpers_are_undefined(self, env: Environment) -> None:
        assert render_string(env, build_chain(), "[{{ signature }}]") == "[]"
        with pytest.raises(UndefinedError):
            render_string(env, build_chain(), "{{ account_label() }}")

    def test_helper_errors_propagate(self, env: Environment) -> None:
        class Broken(BaseContext, view_helpers=["headline"], register=False):
            @property
            def headline(self) -> str:
                raise AttributeError("no headline configured")

            @property
            def footer(self) -> str:
                raise AttributeError("no footer configured")

        with pytest.raises(AttributeError, match="headline"):
            render_string(env, Broken(), "{{ headline }}")
        assert render_string(env, Broken(), "[{{ footer }}]") == "[]"

    def test_no_chain_means_no_helpers(self, env: Environment) -> None:
        assert env.from_string("[{{ greet }}]").render() == "[]"

    def test_autoescape_on_strings(self, env: Environment) -> None:
        assert render_string(env, build_root(), "{{ v }}", v="<b>") == "&lt;b&gt;"

    def test_autoescape_disabled(self) -> None:
        env = build_template_environment(autoescape=False)
        assert render_string(env, build_root(), "{{ v }}", v="<b>") == "<b>"

    def test_custom_context_variable(self) -> None:
        env = build_template_environment(context_variable="chain")
        assert render_string(env, build_root(), "{{ greet() }}") == "hi"
        assert env.from_string("{{ greet() }}").render(chain=build_chain()) == "HI!"


class TestRenderTemplate:
    def test_user_directory_searched_first(self, tmp_path: Path) -> None:
        (tmp_path / "page.txt").write_text("{{ farewell() }}, {{ name }}", encoding="utf-8")
        env = build_template_environment(templates_dir=tmp_path)
        assert render_template(env, build_root(), "page.txt", name="ada") == "bye, ada"

    def test_user_directory_overrides_packaged(self, tmp_path: Path) -> None:
        (tmp_path / "debug").mkdir()
        (tmp_path / "debug" / "chain.html.j2").write_text("custom {{ chain|length }}")
        env = build_template_environment(templates_dir=tmp_path)
        assert render_debug_panel(env, build_chain()) == "custom 3"

    def test_missing_template(self, env: Environment) -> None:
        with pytest.raises(TemplateNotFound):
            render_template(env, build_root(), "nope.html.j2")


class TestDebugPanel:
    def test_lists_layers_and_owned_names(self, env: Environment) -> None:
        html = render_debug_panel(env, build_chain())
        assert html.index("GreetingContext") < html.index("AccountContext")
        assert html.index("AccountContext") < html.index("ShoutingContext")
        assert "<code>account_label</code>" in html
        assert "<code>greet</code> <em>(view helper)</em>" in html
        assert "<code>signature</code></li>" in html
