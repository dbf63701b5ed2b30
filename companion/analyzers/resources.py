"""Curated reference links, ordered with the detected language first."""
from __future__ import annotations

from .languages import LanguageId
from .models import Resource

LANGUAGE_RESOURCES: dict[LanguageId, tuple[Resource, ...]] = {
    LanguageId.TYPESCRIPT: (
        Resource(
            title="TypeScript Handbook",
            description="Type narrowing, generics and declaration patterns from the language team.",
            link="https://www.typescriptlang.org/docs/handbook/intro.html",
        ),
        Resource(
            title="Vitest Guide",
            description="Fast unit testing with first-class TypeScript and ESM support.",
            link="https://vitest.dev/guide/",
        ),
    ),
    LanguageId.JAVASCRIPT: (
        Resource(
            title="MDN JavaScript Guide",
            description="Reference for modern syntax, promises and the standard library.",
            link="https://developer.mozilla.org/en-US/docs/Web/JavaScript/Guide",
        ),
        Resource(
            title="Jest Getting Started",
            description="Write focused unit tests and mocks for JavaScript modules.",
            link="https://jestjs.io/docs/getting-started",
        ),
    ),
    LanguageId.PYTHON: (
        Resource(
            title="PEP 8 Style Guide",
            description="Naming, layout and idioms expected in Python code reviews.",
            link="https://peps.python.org/pep-0008/",
        ),
        Resource(
            title="pytest Documentation",
            description="Fixtures, parametrization and assertion introspection for Python tests.",
            link="https://docs.pytest.org/en/stable/",
        ),
    ),
    LanguageId.GO: (
        Resource(
            title="Effective Go",
            description="Idiomatic Go: naming, errors, concurrency and interfaces.",
            link="https://go.dev/doc/effective_go",
        ),
        Resource(
            title="Go testing package",
            description="Table-driven tests, subtests and benchmarks with the standard library.",
            link="https://pkg.go.dev/testing",
        ),
    ),
    LanguageId.RUBY: (
        Resource(
            title="Ruby Style Guide",
            description="Community conventions for readable, maintainable Ruby.",
            link="https://rubystyle.guide/",
        ),
        Resource(
            title="RSpec Documentation",
            description="Behaviour-driven specs, matchers and mocks for Ruby.",
            link="https://rspec.info/documentation/",
        ),
    ),
}

GENERAL_RESOURCES: tuple[Resource, ...] = (
    Resource(
        title="Refactoring Catalog",
        description="Martin Fowler's catalogue of named refactorings with before/after examples.",
        link="https://refactoring.com/catalog/",
    ),
    Resource(
        title="Google Engineering Practices",
        description="How to review code and write change descriptions reviewers can act on.",
        link="https://google.github.io/eng-practices/",
    ),
    Resource(
        title="The Practical Test Pyramid",
        description="Balancing unit, integration and end-to-end tests in a real codebase.",
        link="https://martinfowler.com/articles/practical-test-pyramid.html",
    ),
)


def resources_for(language: LanguageId) -> tuple[Resource, ...]:
    """Return the language's own resources followed by the general ones."""
    return LANGUAGE_RESOURCES.get(language, ()) + GENERAL_RESOURCES
