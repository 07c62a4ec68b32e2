"""Unit tests for docstring annotation lookup."""

import pytest

from allure_unittest.core.annotations import (
    Annotation,
    AnnotationError,
    AnnotationManager,
    AnnotationProvider,
    parse_annotations,
    resolve_class,
)
from allure_unittest.core.models import (
    DescriptionType,
    TestCaseStartedEvent,
    TestSuiteStartedEvent,
)
from allure_unittest.tests import sample_cases


class Outer:
    class Inner:
        """@title Nested"""


class TestParseAnnotations:
    """Test docstring tag extraction."""

    def test_empty_docstring(self) -> None:
        assert parse_annotations(None) == []
        assert parse_annotations("") == []

    def test_tags_in_order(self) -> None:
        doc = """Summary line.

        @title Something
        @description[html] <b>bold</b>
        @features a, b
        """

        assert parse_annotations(doc) == [
            Annotation("title", "Something"),
            Annotation("description", "<b>bold</b>", "html"),
            Annotation("features", "a, b"),
        ]

    def test_prose_is_not_a_tag(self) -> None:
        doc = """Mail me@example.com about @decorators.

        @pytest.fixture is not a tag either
        """

        assert parse_annotations(doc) == []

    def test_tag_without_value(self) -> None:
        assert parse_annotations("@todo") == [Annotation("todo", "")]


class TestResolveClass:
    """Test lookup of loaded classes by dotted name."""

    def test_top_level_class(self) -> None:
        name = f"{sample_cases.__name__}.CheckoutCase"

        assert resolve_class(name) is sample_cases.CheckoutCase

    def test_nested_class(self) -> None:
        assert resolve_class(f"{__name__}.Outer.Inner") is Outer.Inner

    def test_unloaded_module(self) -> None:
        assert resolve_class("surely.not.imported.Anything") is None

    def test_non_class_attribute(self) -> None:
        assert resolve_class(f"{sample_cases.__name__}.unittest") is None

    def test_bare_name(self) -> None:
        assert resolve_class("CheckoutCase") is None


class TestAnnotationProvider:
    """Test filtering of annotations by ignored names."""

    def test_default_ignored_names_are_dropped(self) -> None:
        provider = AnnotationProvider()

        annotations = provider.get_class_annotations(f"{sample_cases.__name__}.CheckoutCase")

        assert [a.name for a in annotations] == ["title", "description", "features", "severity"]

    def test_method_annotations(self) -> None:
        provider = AnnotationProvider()

        annotations = provider.get_method_annotations(
            f"{sample_cases.__name__}.CheckoutCase", "test_pays_with_card"
        )

        assert "param" not in {a.name for a in annotations}
        assert annotations[0] == Annotation("title", "Pay with saved card")

    def test_unknown_tag_raises(self) -> None:
        provider = AnnotationProvider()

        with pytest.raises(AnnotationError, match="@flaky"):
            provider.get_method_annotations(
                f"{sample_cases.__name__}.CheckoutCase", "test_undocumented_tag"
            )

    def test_extra_ignored_names(self) -> None:
        provider = AnnotationProvider(ignored_annotations=["flaky"])

        annotations = provider.get_method_annotations(
            f"{sample_cases.__name__}.CheckoutCase", "test_undocumented_tag"
        )

        assert annotations == []

    def test_add_ignored_annotations(self) -> None:
        provider = AnnotationProvider()

        provider.add_ignored_annotations({"title", "severity"})

        annotations = provider.get_class_annotations(f"{sample_cases.__name__}.CheckoutCase")
        assert [a.name for a in annotations] == ["description", "features"]

    def test_missing_method_raises(self) -> None:
        provider = AnnotationProvider()

        with pytest.raises(AnnotationError):
            provider.get_method_annotations(f"{sample_cases.__name__}.CheckoutCase", "missing")

    def test_unloaded_class_raises(self) -> None:
        with pytest.raises(AnnotationError):
            AnnotationProvider().get_class_annotations("nowhere.Nothing")


class TestAnnotationManager:
    """Test folding annotations into event metadata."""

    def test_updates_suite_event(self) -> None:
        manager = AnnotationManager([
            Annotation("title", "Checkout"),
            Annotation("description", "Plain words"),
            Annotation("stories", "one,two"),
            Annotation("parameter", "browser firefox"),
        ])
        event = TestSuiteStartedEvent("suite")

        manager.update_test_suite_event(event)

        assert event.title == "Checkout"
        assert event.description.type is DescriptionType.TEXT
        assert [label.value for label in event.labels] == ["one", "two"]

    def test_updates_test_case_event(self) -> None:
        manager = AnnotationManager([
            Annotation("severity", "BLOCKER"),
            Annotation("parameter", "browser firefox"),
        ])
        event = TestCaseStartedEvent("suite-uuid", "test_x")

        manager.update_test_case_event(event)

        assert [(label.name, label.value) for label in event.labels] == [("severity", "blocker")]
        assert [(p.name, p.value) for p in event.parameters] == [("browser", "firefox")]
        assert event.title is None

    @pytest.mark.parametrize(
        "annotation",
        [
            Annotation("severity", "urgent"),
            Annotation("description", "x", "rst"),
            Annotation("label", ""),
            Annotation("retries", "3"),
        ],
    )
    def test_invalid_annotations_raise(self, annotation: Annotation) -> None:
        with pytest.raises(AnnotationError):
            AnnotationManager([annotation])
