# -*- coding: utf-8 -*-

import asyncio
import platform
import sqlite3

import pytest

from litequery import Database, ColumnSpec
from litequery.exceptions import NativeExecutionError, TableNotFoundError

from conftest import fetch_all


WORDS = [
    ColumnSpec("id", "INTEGER PRIMARY KEY"),
    ColumnSpec("name", "TEXT"),
    ColumnSpec("translation", "TEXT"),
]


# ==== schema ==========================================================================


@pytest.mark.asyncio
async def test_create_table(db):
    assert not await db.table_exists("words")

    await db.create_table("words", WORDS)
    assert await db.table_exists("words")

    # creating again is a no-op
    await db.create_table("words", [{"name": "other", "type": "TEXT"}])
    columns = [r[1] for r in fetch_all(db.path, "PRAGMA table_info(words)")]
    assert columns == ["id", "name", "translation"]


@pytest.mark.asyncio
async def test_drop_table(words_db):
    await words_db.drop_table("words")
    assert not await words_db.table_exists("words")


@pytest.mark.asyncio
async def test_drop_missing_table(db):
    with pytest.raises(TableNotFoundError):
        await db.drop_table("nowhere")


@pytest.mark.asyncio
async def test_add_column(words_db):
    await words_db.add_column("words", "note", "TEXT")
    await words_db.add_column("words", "note", "TEXT")

    columns = [r[1] for r in fetch_all(words_db.path, "PRAGMA table_info(words)")]
    assert columns == ["id", "name", "translation", "note"]


@pytest.mark.asyncio
async def test_add_column_ignores_case(words_db):
    await words_db.add_column("words", "NAME", "TEXT")

    columns = [r[1] for r in fetch_all(words_db.path, "PRAGMA table_info(words)")]
    assert columns == ["id", "name", "translation"]


# ==== insert ==========================================================================


@pytest.mark.asyncio
async def test_insert_round_trip(db):
    await db.create_table("words", WORDS)

    rowid = await db.insert_or_replace(
        "words", {"id": 7, "name": "date", "translation": "Dattel"}
    )

    assert rowid == 7
    assert await db.get_one("words", id=7) == {
        "id": 7,
        "name": "date",
        "translation": "Dattel",
    }


@pytest.mark.asyncio
async def test_insert_drops_unstorable_fields(db):
    await db.create_table("words", WORDS + [ColumnSpec("flag", "INTEGER")])

    await db.insert_or_replace(
        "words",
        {"id": 1, "name": "fig", "translation": None, "flag": True, "extra": [1]},
    )

    assert fetch_all(db.path, "SELECT * FROM words") == [(1, "fig", None, None)]


@pytest.mark.asyncio
async def test_insert_replaces(words_db):
    await words_db.insert_or_replace("words", {"id": 1, "name": "apricot"})

    assert fetch_all(words_db.path, "SELECT * FROM words WHERE id = 1") == [
        (1, "apricot", None)
    ]


@pytest.mark.asyncio
async def test_insert_many(words_db):
    rowid = await words_db.insert_or_replace(
        "words", [{"name": "date"}, {"name": "fig"}, {"name": "grape"}]
    )

    assert rowid == 6
    assert fetch_all(words_db.path, "SELECT COUNT(*) FROM words") == [(6,)]


@pytest.mark.asyncio
async def test_insert_many_is_atomic(words_db):
    with pytest.raises(NativeExecutionError):
        await words_db.insert_or_replace(
            "words", [{"name": "date"}, {"name": "fig", "colour": "purple"}]
        )

    assert fetch_all(words_db.path, "SELECT COUNT(*) FROM words") == [(3,)]


@pytest.mark.asyncio
async def test_insert_quotes_are_bound(words_db):
    await words_db.insert_or_replace("words", {"id": 4, "name": 'say "hi"; --'})

    assert (await words_db.get_one("words", id=4))["name"] == 'say "hi"; --'


@pytest.mark.asyncio
async def test_concurrent_inserts(words_db):
    results = await asyncio.gather(
        words_db.insert_or_replace("words", {"id": 10, "name": "kiwi"}),
        words_db.insert_or_replace("words", {"id": 11, "name": "lime"}),
        words_db.insert_or_replace("words", {"id": 12, "name": "mango"}),
        return_exceptions=True,
    )

    stored = fetch_all(words_db.path, "SELECT id FROM words WHERE id >= 10")
    inserted = [r for r in results if not isinstance(r, Exception)]

    assert sorted(inserted) == sorted(r[0] for r in stored)
    assert fetch_all(words_db.path, "SELECT name FROM words WHERE id < 4") == [
        ("apple",),
        ("banana",),
        ("cherry",),
    ]


# ==== exec ============================================================================


@pytest.mark.asyncio
async def test_exec(words_db):
    await words_db.exec(
        [
            "UPDATE words SET translation = 'Apfel!' WHERE id = 1",
            "DELETE FROM words WHERE id = 3",
        ]
    )

    assert fetch_all(words_db.path, "SELECT id, translation FROM words") == [
        (1, "Apfel!"),
        (2, "Banane"),
    ]


@pytest.mark.asyncio
async def test_exec_single_statement(words_db):
    await words_db.exec("DELETE FROM words")
    assert fetch_all(words_db.path, "SELECT COUNT(*) FROM words") == [(0,)]


@pytest.mark.asyncio
async def test_exec_rolls_back(words_db):
    before = fetch_all(words_db.path, "SELECT * FROM words")

    with pytest.raises(NativeExecutionError):
        await words_db.exec(["DELETE FROM words", "DELET FROM words"])

    assert fetch_all(words_db.path, "SELECT * FROM words") == before


@pytest.mark.asyncio
async def test_exec_schema_change_primary_key(db):
    await db.exec("CREATE TABLE codes (code TEXT PRIMARY KEY, label TEXT)")
    await db.insert_or_replace("codes", {"code": "a", "label": "first"})
    assert await db.get_one("codes", id="a") == {"code": "a", "label": "first"}

    await db.exec(
        [
            "DROP TABLE codes",
            "CREATE TABLE codes (label TEXT PRIMARY KEY, code TEXT)",
            "INSERT INTO codes VALUES ('first', 'a')",
        ]
    )
    assert await db.get_one("codes", id="first") == {"label": "first", "code": "a"}


# ==== get =============================================================================


@pytest.mark.asyncio
async def test_get_all(words_db):
    rows = await words_db.get("words")

    assert rows == [
        {"id": 1, "name": "apple", "translation": "Apfel"},
        {"id": 2, "name": "banana", "translation": "Banane"},
        {"id": 3, "name": "cherry", "translation": "Kirsche"},
    ]


@pytest.mark.asyncio
async def test_get_order_limit(words_db):
    rows = await words_db.get(table="words", order="name DESC", limit="2")
    assert [r["name"] for r in rows] == ["cherry", "banana"]


@pytest.mark.asyncio
async def test_get_limit_zero(words_db):
    assert await words_db.get("words", limit=0) == []


@pytest.mark.asyncio
async def test_get_fields_where(words_db):
    rows = await words_db.get("words", fields=["name"], where="id > 1")
    assert rows == [{"name": "banana"}, {"name": "cherry"}]


@pytest.mark.asyncio
async def test_get_group(words_db):
    await words_db.insert_or_replace("words", {"name": "apple", "translation": "Apfel"})

    rows = await words_db.get(
        "words", fields="name, COUNT(*) AS n", group="name", order="name"
    )
    assert rows == [
        {"name": "apple", "n": 2},
        {"name": "banana", "n": 1},
        {"name": "cherry", "n": 1},
    ]


@pytest.mark.asyncio
async def test_get_join(words_db):
    await words_db.exec(
        [
            "CREATE TABLE notes (word_id INTEGER, text TEXT)",
            "INSERT INTO notes VALUES (2, 'yellow')",
        ]
    )

    rows = await words_db.get(
        "words JOIN notes ON words.id = notes.word_id", join="notes"
    )
    assert rows == [{"word_id": 2, "text": "yellow"}]


@pytest.mark.asyncio
async def test_get_invalid(words_db):
    with pytest.raises(NativeExecutionError):
        await words_db.get("words", where="nonsense = ")


# ==== get_one, update, remove =========================================================


@pytest.mark.asyncio
async def test_get_one(words_db):
    assert (await words_db.get_one("words", id=2))["name"] == "banana"
    assert (await words_db.get_one("words", id="cherry", field="name"))["id"] == 3
    assert (await words_db.get_one("words", where="translation LIKE 'A%'"))["id"] == 1
    assert await words_db.get_one("words", id=99) is None


@pytest.mark.asyncio
async def test_update_by_id(words_db):
    count = await words_db.update(table="words", id="1", update={"name": " x "})

    assert count == 1
    assert fetch_all(words_db.path, "SELECT name FROM words ORDER BY id") == [
        ("x",),
        ("banana",),
        ("cherry",),
    ]


@pytest.mark.asyncio
async def test_update_no_match(words_db):
    assert await words_db.update("words", {"name": "x"}, id=99) == 0


@pytest.mark.asyncio
async def test_update_by_field_and_where(words_db):
    assert await words_db.update("words", {"translation": "B"}, "banana", "name") == 1
    assert await words_db.update("words", {"translation": "?"}, where="id > 1") == 2

    assert fetch_all(words_db.path, "SELECT translation FROM words ORDER BY id") == [
        ("Apfel",),
        ("?",),
        ("?",),
    ]


@pytest.mark.asyncio
async def test_update_custom_primary_key(db):
    await db.create_table(
        "codes", [ColumnSpec("label", "TEXT"), ColumnSpec("code", "TEXT PRIMARY KEY")]
    )
    await db.insert_or_replace("codes", [{"code": "a", "label": "one"}])

    assert await db.update("codes", {"label": "uno"}, id="a") == 1
    assert await db.get_one("codes", id="a") == {"label": "uno", "code": "a"}


@pytest.mark.asyncio
async def test_remove(words_db):
    assert await words_db.remove("words", id=1) == 1
    assert await words_db.remove("words", id="banana", field="name") == 1
    assert await words_db.remove("words", id="banana", field="name") == 0
    assert await words_db.remove("words", where="translation = 'Kirsche'") == 1

    assert fetch_all(words_db.path, "SELECT COUNT(*) FROM words") == [(0,)]


# ==== construction ====================================================================


def test_default_location(home_dir, monkeypatch):
    monkeypatch.setattr(platform, "system", lambda: "Linux")
    monkeypatch.setenv("XDG_DATA_HOME", str(home_dir / "data"))
    db = Database("notes")

    assert db.path == str(home_dir / "data" / "litequery" / "notes.sqlite")


@pytest.mark.asyncio
async def test_install_from(tmp_path):
    template = tmp_path / "template.sqlite"
    con = sqlite3.connect(str(template))
    con.execute("CREATE TABLE words (id INTEGER PRIMARY KEY, name TEXT)")
    con.execute("INSERT INTO words VALUES (1, 'apple')")
    con.commit()
    con.close()

    directory = str(tmp_path / "databases")

    db = Database("words", install_from=str(template), directory=directory)
    assert db.installed
    assert await db.get_one("words", id=1) == {"id": 1, "name": "apple"}

    await db.insert_or_replace("words", {"id": 2, "name": "banana"})

    # a second instance does not overwrite the installed copy
    db2 = Database("words", install_from=str(template), directory=directory)
    assert len(await db2.get("words")) == 2



@pytest.mark.asyncio
async def test_primary_key_changed_by_other_instance(tmp_path):
    directory = str(tmp_path / "databases")
    db1 = Database("shared", directory=directory)
    db2 = Database("shared", directory=directory)

    await db1.exec("CREATE TABLE codes (code TEXT PRIMARY KEY, label TEXT)")
    await db1.insert_or_replace("codes", {"code": "a", "label": "first"})
    assert await db1.get_one("codes", id="a") == {"code": "a", "label": "first"}

    await db2.exec(
        [
            "DROP TABLE codes",
            "CREATE TABLE codes (label TEXT PRIMARY KEY, code TEXT)",
            "INSERT INTO codes VALUES ('a', 'b')",
            "INSERT INTO codes VALUES ('b', 'a')",
        ]
    )

    assert await db1.get_one("codes", id="b") == {"label": "b", "code": "a"}
    assert await db1.remove("codes", id="a") == 1
    assert fetch_all(db1.path, "SELECT label, code FROM codes") == [("b", "a")]


@pytest.mark.asyncio
async def test_legacy_quoting_round_trip(tmp_path):
    db = Database("legacy", directory=str(tmp_path), legacy_quoting=True)
    await db.create_table("words", WORDS)

    await db.insert_or_replace(
        "words",
        [
            {"id": 1, "name": "apple", "translation": "Apfel"},
            {"id": 2, "name": "banana", "translation": "Banane"},
        ],
    )
    assert await db.get_one("words", id=1) == {
        "id": 1,
        "name": "apple",
        "translation": "Apfel",
    }

    assert await db.update("words", {"translation": ' Ap"fel '}, id=1) == 1
    assert (await db.get_one("words", id=1))["translation"] == 'Ap"fel'

    # double-quoted values resolve to a column of the same name first
    assert await db.update("words", {"name": "translation"}, id=2) == 1
    assert (await db.get_one("words", id=2))["name"] == "Banane"

    assert await db.remove("words", id=1) == 1
    assert fetch_all(db.path, "SELECT id FROM words") == [(2,)]
