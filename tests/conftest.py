"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from doc_assembly.config import DocAssemblyConfig, ExternalHelperConfig
from doc_assembly.logging import clear_context
from tests._support import write_files
from tests._support.extractor import FakeExtractor

FOO_JS = """\
/**
 * Foo helper for tests.
 * {{ intro }}
 */
class Foo {
  /**
   * Checks that text is visible.
   * @param {string} text expected text.
   * @param {LocatorOrString} [context=null] element to search in.
   */
  see(text, context = null) {}

  /**
   * Clicks an element.
   * {{> click }}
   */
  click(locator) {}

  /**
   * Uses a partial nobody wrote.
   * {{> missing }}
   */
  wait(sec) {}
}

module.exports = Foo;
"""

WEBDRIVER_JS = """\
/**
 * WebDriver helper.
 */
class WebDriver {
  /**
   * WebDriver click.
   * {{> click }}
   */
  click(locator) {}

  /**
   * Returns the current url.
   */
  grabCurrentUrl() {}

  /**
   * Grabs element text.
   * @param {CodeceptJS.LocatorOrString} locator element.
   */
  grabTextFrom(locator) {}

  /**
   * Checks that text is visible.
   * @param {string} text expected text.
   */
  see(text) {}

  /**
   * Waits for an element.
   * @param {LocatorOrString} locator element.
   */
  waitForElement(locator) {}
}

module.exports = WebDriver;
"""

APPIUM_JS = """\
/**
 * Appium helper.
 */
class Appium {
  /**
   * Appium click.
   * {{> click }}
   */
  click(locator) {}

  /**
   * Swipes on the screen.
   * @param {LocatorOrString} locator element.
   */
  swipe(locator) {}
}

module.exports = Appium;
"""

POLLY_JS = """\
/**
 * Deprecated request mocking.
 */
class Polly {
  /**
   * Mocks a request.
   * @param {LocatorOrString} url request url.
   */
  mockRequest(url) {}
}
"""

SCREENSHOT_PLUGIN_JS = """\
/**
 * Saves a screenshot on failure.
 * @param {object} config plugin config.
 */
screenshotOnFail(config) {}
"""

DETOX_JS = """\
/**
 * Detox helper.
 */
class Detox {
  /**
   * Taps an element.
   * @param {CodeceptJS.LocatorOrString} locator element.
   */
  tap(locator) {}
}
"""

CLICK_PARTIAL = """\
@param {CodeceptJS.LocatorOrString} locator clickable element."""

INTRO_SHARED = "Shared introduction text."


@pytest.fixture(autouse=True)
def _clean_log_context():
    """Every test starts with an empty log context."""
    clear_context()
    yield
    clear_context()


@pytest.fixture
def project_root(tmp_path) -> Path:
    """A small CodeceptJS-like project tree."""
    write_files(
        tmp_path,
        {
            "lib/helper/Foo.js": FOO_JS,
            "lib/helper/WebDriver.js": WEBDRIVER_JS,
            "lib/helper/Appium.js": APPIUM_JS,
            "lib/helper/Polly.js": POLLY_JS,
            "lib/plugin/screenshotOnFail.js": SCREENSHOT_PLUGIN_JS,
            "docs/webapi/click.mustache": CLICK_PARTIAL,
            "docs/shared/intro.mustache": INTRO_SHARED,
            "node_modules/@codeceptjs/detox-helper/Detox.js": DETOX_JS,
            "CHANGELOG.md": "## 3.0.0\n\n* [Playwright] Fixed click by @davertmik in #1234\n",
        },
    )
    return tmp_path


@pytest.fixture
def config(project_root) -> DocAssemblyConfig:
    """Configuration for the fixture project."""
    return DocAssemblyConfig(
        project_root=project_root,
        external_helpers=[ExternalHelperConfig("Detox", Path("node_modules/@codeceptjs/detox-helper/Detox.js"))],
    )


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def source_text():
    """Fixture module sources by identifier."""
    return {"Foo": FOO_JS, "WebDriver": WEBDRIVER_JS, "Appium": APPIUM_JS, "Polly": POLLY_JS}
