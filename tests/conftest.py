import logging
import os
import tempfile

import pytest
from dotenv import find_dotenv, load_dotenv

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

env_file = find_dotenv(f'.env{os.getenv("ENV", ".test")}')
logger.info("Fetching env_file %s", env_file)
load_dotenv(env_file)

# Settings are read when formstamp is first imported, so point the app at a
# throwaway database and storage root before any test module imports it.
TEST_ROOT = tempfile.mkdtemp(prefix="formstamp-test-")
TEST_DATABASE_FILE = os.path.join(TEST_ROOT, "testcase.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DATABASE_FILE}"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_DIR"] = os.path.join(TEST_ROOT, "storage")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, delete  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from formstamp.companies.models import Company, CompanyValue  # noqa: E402
from formstamp.core.config import settings  # noqa: E402
from formstamp.core.db import Base  # noqa: E402
from formstamp.datapoints.models import Datapoint  # noqa: E402
from formstamp.main import app as fast_api_app  # noqa: E402
from formstamp.templates.models import PDFTemplate, TemplateMapping  # noqa: E402
from formstamp.templates.storage import build_template_store  # noqa: E402

engine = create_engine(
    f"sqlite:///{TEST_DATABASE_FILE}", connect_args={"check_same_thread": False}
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base.metadata.create_all(bind=engine)


@pytest.fixture
def db_session():
    """
    Synchronous session for arranging rows. Every test starts from empty tables.
    """
    db = TestSessionLocal()
    for model in (TemplateMapping, PDFTemplate, CompanyValue, Company, Datapoint):
        db.execute(delete(model))
    db.commit()
    try:
        yield db
        db.commit()
    finally:
        db.close()


@pytest.fixture
def template_store():
    return build_template_store(settings)


@pytest.fixture(scope="session")
def client():
    with TestClient(fast_api_app) as test_client:
        yield test_client
