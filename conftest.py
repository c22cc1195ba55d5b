import pytest

from catalog.library import Inventory
from catalog.storage import InventoryStorage
from catalog.ui_helpers import set_output_mode


@pytest.fixture
def data_file(tmp_path, request):
    # Unique inventory file for each test
    return tmp_path / f"test_{request.node.name}.dat"


@pytest.fixture
def lib(data_file):
    return Inventory(storage=InventoryStorage(data_file))


@pytest.fixture
def cli_env(data_file, monkeypatch):
    """Point the CLI at a per-test inventory file with plain output."""
    import main
    from config import settings

    monkeypatch.setattr(settings, "data_file", str(data_file))
    monkeypatch.setattr(settings, "persist", True)
    monkeypatch.setattr(settings, "output_mode", "plain")
    main.LibraryManager.reset()
    set_output_mode("plain")
    yield settings
    main.LibraryManager.reset()
    set_output_mode("plain")
