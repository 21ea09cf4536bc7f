import importlib
import pathlib
import sys

import pytest

# Ensure project root on sys.path for `import tracker`
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture()
def db_tmpdir(tmp_path, monkeypatch):
    data_dir = tmp_path / "var"
    data_dir.mkdir(parents=True, exist_ok=True)
    db_path = tmp_path / "app.db"

    monkeypatch.setenv("DATA_DIR", str(data_dir))
    monkeypatch.setenv("SQLITE_PATH", str(db_path))
    monkeypatch.setenv("OPENAI_API_KEY", "")

    import tracker.core.config as config

    importlib.reload(config)
    import tracker.db.conn as conn

    importlib.reload(conn)

    sql = (ROOT / "migrations" / "001_init.sql").read_text(encoding="utf-8")
    with conn.db() as c:
        c.executescript(sql)
        c.commit()

    return tmp_path


@pytest.fixture()
def mem():
    from tracker.core.kv_store import MemoryStorage

    return MemoryStorage()


# ---------------- Async test support (no external plugin) -----------------


def pytest_configure(config):
    # Register asyncio marker to avoid unknown-mark warnings
    config.addinivalue_line("markers", "asyncio: mark test as async")


def pytest_pyfunc_call(pyfuncitem):
    """Execute async test functions via a local event loop."""
    import asyncio
    import inspect

    testfunction = pyfuncitem.obj
    if inspect.iscoroutinefunction(testfunction):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            # Only pass fixtures that the function actually expects
            argnames = tuple(getattr(pyfuncitem, "_fixtureinfo").argnames or ())
            kwargs = {
                name: pyfuncitem.funcargs[name]
                for name in argnames
                if name in pyfuncitem.funcargs
            }
            loop.run_until_complete(testfunction(**kwargs))
        finally:
            loop.close()
            asyncio.set_event_loop(None)
        return True
    return None
