"""Обход сетки проектов."""
import asyncio

import pytest

from apartments_sync.scraper import locators
from apartments_sync.scraper.errors import CatalogUnavailableError, ScrapeCancelledError
from apartments_sync.scraper.walker import CatalogWalker

from conftest import make_catalog, make_item, make_project


def _walk(session, config, cancel_event=None):
    return asyncio.run(CatalogWalker(session, config, cancel_event).walk())


def test_walk_preserves_discovery_order(scrape_config):
    session = make_catalog([
        make_project("Kalnciema", "/kalnciema", items=[make_item(title="K-1"), make_item(title="K-2")]),
        make_project("Lucavsala", "/lucavsala", items=[make_item(title="L-1")]),
    ])

    records = _walk(session, scrape_config)

    assert [(r.project_name, r.plan) for r in records] == [
        ("Kalnciema", "K-1"),
        ("Kalnciema", "K-2"),
        ("Lucavsala", "L-1"),
    ]
    assert records[0].project_link == "/kalnciema"


def test_missing_grid_is_fatal(scrape_config):
    session = make_catalog(grid=False)

    with pytest.raises(CatalogUnavailableError):
        _walk(session, scrape_config)


def test_empty_grid_is_a_valid_empty_result(scrape_config):
    assert _walk(make_catalog([]), scrape_config) == []


def test_project_without_button_contributes_nothing(scrape_config):
    session = make_catalog([
        make_project("Teikas nams", "/teika", has_button=False),
        make_project("Lucavsala", "/lucavsala", items=[make_item(title="L-1")]),
    ])

    records = _walk(session, scrape_config)

    assert [r.project_name for r in records] == ["Lucavsala"]


def test_failing_projects_are_isolated(scrape_config):
    session = make_catalog([
        make_project("Never opens", "/never", modal_opens=False),
        make_project("Empty", "/empty", items=[]),
        make_project("", "/nameless", has_name=False, items=[make_item()]),
        make_project("Lucavsala", "/lucavsala", items=[make_item(title="L-1")]),
    ])

    records = _walk(session, scrape_config)

    assert [r.plan for r in records] == ["L-1"]


def test_consent_is_accepted_when_present(scrape_config):
    session = make_catalog([], consent=True)
    button = session.document.children[locators.CONSENT_BUTTON][0]

    _walk(session, scrape_config)

    assert button.clicks == [None]
    assert locators.CONSENT_BUTTON not in session.document.children


def test_missing_consent_is_not_an_error(scrape_config):
    session = make_catalog([make_project("Lucavsala", "/l", items=[make_item()])])

    assert len(_walk(session, scrape_config)) == 1
    assert (locators.CONSENT_BUTTON, "visible") in session.waits


def test_cancel_at_project_boundary(scrape_config):
    cancel_event = asyncio.Event()
    first = make_project("Kalnciema", "/k", items=[make_item()])
    session = make_catalog([first, make_project("Lucavsala", "/l", items=[make_item()])])
    button = first.children[locators.PROJECT_OPEN_BUTTON][0]
    open_dialog = button.on_click

    def open_and_cancel(s):
        open_dialog(s)
        cancel_event.set()

    button.on_click = open_and_cancel

    with pytest.raises(ScrapeCancelledError):
        _walk(session, scrape_config, cancel_event)
