"""Pytest configuration and shared fixtures for the flatdown test suite.

This module provides shared fixtures and test configuration that are used
across the entire test suite.
"""

import os
from pathlib import Path

import pytest

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    # Register custom Hypothesis profiles
    settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=20)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    # Load profile from environment or use default
    profile = os.getenv("HYPOTHESIS_PROFILE", "dev")
    settings.load_profile(profile)
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def sample_markdown() -> str:
    """Provide a Markdown document touching every supported construct.

    Returns
    -------
    str
        Sample document without raw HTML, definitions or escapes.

    """
    return """# Sample Document

This is a **sample document** with *italic text* and some `inline code`.

## Section 2

- Item 1
- Item 2

1. First item
2. Second item

```python
print("Hello")
```

***

See [the site](https://example.com "Example") for ~~nothing~~ more.
"""


@pytest.fixture
def isolated_config(monkeypatch, tmp_path: Path) -> Path:
    """Run a test in an empty directory with no configuration in effect.

    Returns
    -------
    Path
        The working directory for the test.

    """
    monkeypatch.delenv("FLATDOWN_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
