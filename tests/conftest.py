import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Initialize the storefront domain and push its domain context. The activated
    domain can then be referred to elsewhere as `current_domain`.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from storefront.domain import storefront

    storefront.init()
    storefront.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Catalogue fixtures shared by every test area
# ---------------------------------------------------------------------------
@pytest.fixture()
def category_id():
    from protean.utils.globals import current_domain
    from storefront.catalogue.management import CreateCategory

    return current_domain.process(
        CreateCategory(name="Fashion", subcategories=[{"name": "T-Shirts"}]),
        asynchronous=False,
    )


@pytest.fixture()
def create_product(category_id):
    """Factory creating a product through the management command. Returns its id."""
    from protean.utils.globals import current_domain
    from storefront.catalogue.management import CreateProduct

    def _create(**overrides):
        fields = {"title": "Plain Tee", "price": 10.0, "stock": 5, "category_id": category_id}
        fields.update(overrides)
        return current_domain.process(CreateProduct(**fields), asynchronous=False)

    return _create
