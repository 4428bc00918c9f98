import pytest

from helpers.catalogs import SMALL_SCREENS, without_extra_step
from helpers.fakes import MemoryPersister
from intake_flow.catalog import ScreenCatalog
from intake_flow.completion import CompletionHandler
from intake_flow.flow import IntakeFlow


@pytest.fixture(scope="session")
def catalog():
    return ScreenCatalog.from_yaml()


@pytest.fixture
def small_catalog():
    return ScreenCatalog.from_dicts(SMALL_SCREENS)


@pytest.fixture
def plain_catalog():
    """Same screens without the extra step on the conclusion."""
    return ScreenCatalog.from_dicts(
        without_extra_step(SMALL_SCREENS), require_extra_step=False
    )


@pytest.fixture
def persister():
    return MemoryPersister()


@pytest.fixture
def make_flow(persister):
    """Factory: ``make_flow(catalog, **kwargs)`` bound to the shared persister."""
    def _make(catalog, **kwargs):
        return IntakeFlow(catalog, CompletionHandler(persister), **kwargs)
    return _make
