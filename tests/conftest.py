import pytest

from csvquery.config import Settings

DATASET = "name,age,city\nJohn,30,New York\n"


@pytest.fixture
def dataset(tmp_path):
    path = tmp_path / "dataset.csv"
    path.write_text(DATASET, encoding="utf-8")
    return path


@pytest.fixture
def settings(dataset):
    return Settings(csv_file_path=str(dataset))


@pytest.fixture
def multipart_settings(dataset):
    return Settings(csv_file_path=str(dataset), upload_mode="multipart")
