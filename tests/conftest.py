import os
import tempfile

# Configure before any api.* import reads the environment.
os.environ.setdefault("CLOUDMASTER_DATA_DIR", tempfile.mkdtemp(prefix="cloudmaster-tests-"))
os.environ.setdefault("DATABASE_URL", "sqlite://")

from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from helpers import make_course  # noqa: E402
from models import Course  # noqa: E402


@pytest.fixture
def course() -> Course:
    return make_course()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def db_session():
    from api.database import init_db, make_engine

    engine = make_engine("sqlite://")
    init_db(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
