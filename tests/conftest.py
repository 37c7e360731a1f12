import sys
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]

# Prefer repo sources over any installed package.
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(autouse=True)
def reset_api_store():
    from api.main import store

    store.reset()
    yield
    store.reset()


@pytest.fixture
def sample_csv(tmp_path):
    path = tmp_path / "properties.csv"
    path.write_text(
        "address,value,rent\n"
        "1 River Rd,200000,1200\n"
        "\n"
        "2 Hill Ave,400000,2500\n",
        encoding="utf-8",
    )
    return path
