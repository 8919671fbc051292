"""Shared fixtures for linkwatch tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from linkwatch.dom import Document, Element


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Keep a developer's ``.env`` or environment out of the tests."""
    monkeypatch.delenv("LINKWATCH_ROOT_HREF", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def page():
    """A small element tree::

        <body>                       (document at http://example.org/app/)
          <div id="container">
            <a href="guide/intro"><span/></a>
            <a href="https://other.org/">
            <a name="no-href">
            <p>
          </div>
        </body>
    """
    body = Element("body", document=Document("http://example.org/app/"))
    container = body.append(Element("div", {"id": "container"}))
    local = container.append(Element("a", {"href": "guide/intro"}))
    label = local.append(Element("span"))
    external = container.append(Element("a", {"href": "https://other.org/"}))
    bare = container.append(Element("a", {"name": "no-href"}))
    paragraph = container.append(Element("p"))
    return SimpleNamespace(
        body=body,
        container=container,
        local=local,
        label=label,
        external=external,
        bare=bare,
        paragraph=paragraph,
    )
