"""Tests for the context class registry."""

from __future__ import annotations

import pytest

from ctxchain import BaseContext
from ctxchain.domain.registry import CONTEXT_REGISTRY, get_context_class, register_context
from tests.sample_contexts import GreetingContext


class TestAutoRegistration:
    def test_base_context_registered(self) -> None:
        assert CONTEXT_REGISTRY["BaseContext"] is BaseContext

    def test_subclasses_register_by_name(self) -> None:
        assert CONTEXT_REGISTRY["GreetingContext"] is GreetingContext

    def test_redefinition_replaces(self) -> None:
        class ReportContext(BaseContext):
            pass

        first = ReportContext

        class ReportContext(BaseContext):  # noqa: F811
            pass

        assert CONTEXT_REGISTRY["ReportContext"] is ReportContext
        assert CONTEXT_REGISTRY["ReportContext"] is not first

    def test_opt_out(self) -> None:
        class HiddenContext(BaseContext, register=False):
            pass

        assert "HiddenContext" not in CONTEXT_REGISTRY


class TestRegisterContext:
    def test_explicit_name(self) -> None:
        register_context("greeting", GreetingContext)
        assert get_context_class("greeting") is GreetingContext

    def test_same_class_twice_is_fine(self) -> None:
        register_context("greeting", GreetingContext)
        register_context("greeting", GreetingContext)

    def test_conflict_rejected(self) -> None:
        class OtherContext(BaseContext, register=False):
            pass

        with pytest.raises(ValueError, match="already registered"):
            register_context("GreetingContext", OtherContext)

    def test_conflict_with_replace(self) -> None:
        class OtherContext(BaseContext, register=False):
            pass

        register_context("GreetingContext", OtherContext, replace=True)
        assert CONTEXT_REGISTRY["GreetingContext"] is OtherContext

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            register_context("  ", GreetingContext)

    def test_non_context_rejected(self) -> None:
        with pytest.raises(TypeError, match="must extend BaseContext"):
            register_context("Thing", object)  # type: ignore[arg-type]


class TestGetContextClass:
    def test_exact_name(self) -> None:
        assert get_context_class("GreetingContext") is GreetingContext

    def test_suffixed_name(self) -> None:
        assert get_context_class("Greeting") is GreetingContext

    def test_custom_suffix(self) -> None:
        class PriceLayer(BaseContext):
            pass

        assert get_context_class("Price", suffix="Layer") is PriceLayer

    def test_missing(self) -> None:
        with pytest.raises(KeyError, match="Nope"):
            get_context_class("Nope")
