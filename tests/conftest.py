import pytest
from dotenv import load_dotenv


@pytest.fixture(scope="session", autouse=True)
def load_test_environment():
    load_dotenv(".env.test", override=True)
    yield
