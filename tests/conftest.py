import pytest

from instantiator import Instantiator, get_context, reset_context
from instantiator.shared.logger import configure_logging


# -----------------------------
# Domain stand-ins
# -----------------------------
class Database:
    def __init__(self, dsn: str = "postgres://localhost/app"):
        self.dsn = dsn


class PostgresDatabase(Database):
    pass


class InMemoryDatabase(Database):
    pass


class DatabaseInstantiator(Instantiator[Database], type_tag="database"):
    registrations = 0

    def register(self):
        DatabaseInstantiator.registrations += 1
        self.instance({"default": PostgresDatabase})
        self.singleton({"test": InMemoryDatabase})

    def get_database(self, dsn: str = "postgres://localhost/app") -> Database:
        return self.get_instance(dsn)


# -----------------------------
# Fixtures
# -----------------------------
@pytest.fixture(autouse=True)
def fresh_context():
    """Give every test its own process-wide context."""
    reset_context()
    DatabaseInstantiator.registrations = 0
    yield get_context()
    reset_context()
    configure_logging()


@pytest.fixture
def database_instantiator():
    return DatabaseInstantiator
