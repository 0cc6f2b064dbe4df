# -*- coding: utf-8 -*-

import sqlite3
import logging

import pytest

from litequery.main import Database
from litequery.config.main import _config_instances, _state_instances


logging.getLogger("litequery").setLevel(logging.DEBUG)


SEED_SQL = """
CREATE TABLE words (id INTEGER PRIMARY KEY, name TEXT, translation TEXT);
INSERT INTO words (id, name, translation) VALUES (1, 'apple', 'Apfel');
INSERT INTO words (id, name, translation) VALUES (2, 'banana', 'Banane');
INSERT INTO words (id, name, translation) VALUES (3, 'cherry', 'Kirsche');
"""


@pytest.fixture(autouse=True)
def home_dir(tmp_path, monkeypatch):
    """Keeps config, state and log files out of the real home directory."""
    home = tmp_path / "home"
    home.mkdir()

    monkeypatch.setenv("HOME", str(home))
    for var in ("XDG_CONFIG_HOME", "XDG_DATA_HOME", "XDG_CACHE_HOME"):
        monkeypatch.delenv(var, raising=False)

    _config_instances.clear()
    _state_instances.clear()

    yield home

    _config_instances.clear()
    _state_instances.clear()


@pytest.fixture
def db(tmp_path):
    return Database("test", directory=str(tmp_path / "databases"))


@pytest.fixture
def words_db(db):
    con = sqlite3.connect(db.path)
    con.executescript(SEED_SQL)
    con.close()
    return db


def fetch_all(path, sql):
    con = sqlite3.connect(path)
    try:
        return con.execute(sql).fetchall()
    finally:
        con.close()
