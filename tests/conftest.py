# File: tests/conftest.py
from __future__ import annotations

import pytest
from fakes import FakeWeb

from contact_scout.config import ScoutConfig


TIMENT_ROOT = """
<html><body>
  <nav>
    <a href="/contact">Contact us</a>
    <a href="/blog/post-one-two-three-four-five">Latest post</a>
    <a href="https://facebook.com/timent">Facebook</a>
    <a href="https://other.example/partner">Partner</a>
  </nav>
  <p>Call us: (415) 626-4474</p>
  <address>1 Root Plaza, Rootville, CA 90001</address>
</body></html>
"""

TIMENT_CONTACT = """
<html><body>
  <a href="/">Home</a>
  <div class="contact-info">Visit: 500 Market St, San Francisco, CA 94105 today</div>
  <address>Timent Inc.
     500 Market St</address>
  <footer>HQ 500 Market St, San Francisco, CA 94105</footer>
  <p>Phone +1 415 626 4474</p>
</body></html>
"""


@pytest.fixture()
def timent_web() -> FakeWeb:
    return FakeWeb(
        {
            "http://timent.com/": TIMENT_ROOT,
            "http://timent.com/contact": TIMENT_CONTACT,
            "http://timent.com/blog/post-one-two-three-four-five": "<p>Blog 555-123-4567</p>",
        }
    )


@pytest.fixture()
def basic_config() -> ScoutConfig:
    return ScoutConfig(
        concurrency=2,
        default_scheme="http",
        request_timeout=2.0,
        page_timeout=2.0,
        user_agent="TestAgent/1.0",
    )
