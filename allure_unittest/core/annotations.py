"""Annotation lookup for test classes and methods.

Annotations are tags written in docstrings, one per line:

    @title Checkout with a saved card
    @description[markdown] Uses the **default** card on file.
    @features checkout, payments
    @severity critical
    @label owner payments-team

Tags that belong to the host runner or to docstring conventions are
ignored so that only metadata meant for the report is surfaced.
"""

import inspect
import re
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .models import (
    Description,
    DescriptionType,
    Label,
    LabelType,
    Parameter,
    SeverityLevel,
    TestCaseStartedEvent,
    TestSuiteStartedEvent,
)

_TAG_PATTERN = re.compile(r"^@(?P<name>\w+)(?:\[(?P<qualifier>\w+)\])?(?:\s+(?P<value>.*))?$")

# unittest structure, docstring fields and decorator names
DEFAULT_IGNORED_ANNOTATIONS = frozenset({
    "setUp", "tearDown", "setUpClass", "tearDownClass", "setUpModule",
    "tearDownModule", "addCleanup", "doCleanups", "group", "tag", "category",
    "dataProvider", "subTest", "parameterized", "expectedException",
    "expectedFailure", "raises", "skip", "skipIf", "skipUnless", "param",
    "type", "return", "returns", "rtype", "raise", "note", "see", "since",
    "deprecated", "todo", "author", "version",
})

KNOWN_ANNOTATIONS = frozenset({
    "title", "description", "features", "stories", "issues", "severity",
    "test_case_id", "label", "parameter",
})


class AnnotationError(ValueError):
    """A docstring tag is unknown or malformed."""


@dataclass(frozen=True)
class Annotation:
    """A single docstring tag."""

    name: str
    value: str
    qualifier: str | None = None


def resolve_class(class_name: str) -> type | None:
    """Look up an already-loaded class by its dotted name.

    Never imports anything: only modules present in sys.modules are searched.
    """
    parts = class_name.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module = sys.modules.get(".".join(parts[:split]))
        if module is None:
            continue
        target: Any = module
        for attr in parts[split:]:
            target = getattr(target, attr, None)
            if target is None:
                break
        if inspect.isclass(target):
            return target
    return None


def parse_annotations(docstring: str | None) -> list[Annotation]:
    """Extract every tag from a docstring, in declaration order."""
    if not docstring:
        return []
    annotations = []
    for line in inspect.cleandoc(docstring).splitlines():
        match = _TAG_PATTERN.match(line.strip())
        if match:
            annotations.append(
                Annotation(
                    name=match.group("name"),
                    value=(match.group("value") or "").strip(),
                    qualifier=match.group("qualifier"),
                )
            )
    return annotations


class AnnotationProvider:
    """Reads annotations declared on classes and methods.

    Ignored names are dropped silently; any other tag that the report
    model does not understand raises AnnotationError.
    """

    def __init__(self, ignored_annotations: Iterable[str] = ()):
        self._ignored: set[str] = set(DEFAULT_IGNORED_ANNOTATIONS)
        self.add_ignored_annotations(ignored_annotations)

    @property
    def ignored_annotations(self) -> frozenset[str]:
        return frozenset(self._ignored)

    def add_ignored_annotations(self, names: Iterable[str]) -> None:
        self._ignored.update(names)

    def get_class_annotations(self, class_name: str) -> list[Annotation]:
        """Return the annotations declared on a loaded class.

        Raises:
            AnnotationError: If the class is not loaded or declares an
                unknown tag.
        """
        cls = resolve_class(class_name)
        if cls is None:
            raise AnnotationError(f"Class {class_name} is not loaded")
        return self._filter(parse_annotations(cls.__doc__), class_name)

    def get_method_annotations(self, class_name: str, method_name: str) -> list[Annotation]:
        """Return the annotations declared on a method of a loaded class.

        Raises:
            AnnotationError: If the class or method cannot be found or the
                method declares an unknown tag.
        """
        cls = resolve_class(class_name)
        method = getattr(cls, method_name, None) if cls is not None else None
        if method is None:
            raise AnnotationError(f"Method {class_name}.{method_name} not found")
        return self._filter(
            parse_annotations(inspect.getdoc(method)),
            f"{class_name}.{method_name}",
        )

    def _filter(self, annotations: list[Annotation], owner: str) -> list[Annotation]:
        kept = []
        for annotation in annotations:
            if annotation.name in self._ignored:
                continue
            if annotation.name not in KNOWN_ANNOTATIONS:
                raise AnnotationError(
                    f"Unknown annotation @{annotation.name} on {owner}"
                )
            kept.append(annotation)
        return kept


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _split_pair(annotation: Annotation) -> tuple[str, str]:
    name, _, value = annotation.value.partition(" ")
    if not name:
        raise AnnotationError(f"@{annotation.name} requires a name")
    return name, value.strip()


class AnnotationManager:
    """Folds a list of annotations into report metadata and applies it to events."""

    def __init__(self, annotations: Iterable[Annotation]):
        self.title: str | None = None
        self.description: Description | None = None
        self.labels: list[Label] = []
        self.parameters: list[Parameter] = []

        for annotation in annotations:
            self._process(annotation)

    def _process(self, annotation: Annotation) -> None:
        name = annotation.name
        if name == "title":
            self.title = annotation.value
        elif name == "description":
            try:
                kind = DescriptionType(annotation.qualifier or "text")
            except ValueError as e:
                raise AnnotationError(
                    f"Unknown description type: {annotation.qualifier}"
                ) from e
            self.description = Description(value=annotation.value, type=kind)
        elif name == "features":
            self._add_labels(LabelType.FEATURE, _split_list(annotation.value))
        elif name == "stories":
            self._add_labels(LabelType.STORY, _split_list(annotation.value))
        elif name == "issues":
            self._add_labels(LabelType.ISSUE, _split_list(annotation.value))
        elif name == "severity":
            try:
                level = SeverityLevel(annotation.value.lower())
            except ValueError as e:
                raise AnnotationError(f"Unknown severity: {annotation.value}") from e
            self._add_labels(LabelType.SEVERITY, [level.value])
        elif name == "test_case_id":
            self._add_labels(LabelType.TEST_ID, [annotation.value])
        elif name == "label":
            label_name, value = _split_pair(annotation)
            self.labels.append(Label(name=label_name, value=value))
        elif name == "parameter":
            param_name, value = _split_pair(annotation)
            self.parameters.append(Parameter(name=param_name, value=value))
        else:
            raise AnnotationError(f"Unknown annotation @{name}")

    def _add_labels(self, label_type: LabelType, values: list[str]) -> None:
        self.labels.extend(Label(name=label_type.value, value=v) for v in values)

    def update_test_suite_event(self, event: TestSuiteStartedEvent) -> None:
        if self.title:
            event.title = self.title
        if self.description:
            event.description = self.description
        event.labels.extend(self.labels)

    def update_test_case_event(self, event: TestCaseStartedEvent) -> None:
        if self.title:
            event.title = self.title
        if self.description:
            event.description = self.description
        event.labels.extend(self.labels)
        event.parameters.extend(self.parameters)
