import pytest

from scripts.data.import_items import import_items, load_items_csv


def write_csv(tmp_path, text):
    path = tmp_path / "items.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_import_skips_existing_rows(store, tmp_path):
    path = write_csv(
        tmp_path,
        "front,back,deck,tags\n"
        "hola,hello,,greetings\n"
        "adios ,  goodbye,,\"greetings, a1\"\n"
        "bonjour,hello,french,\n"
        "hola,hello,,\n"
        ",missing front,,\n",
    )

    df = load_items_csv(path, default_deck="spanish")
    assert import_items(store, df) == (3, 0)

    spanish = {item.front: item for item in store.all_items(deck_id="spanish")}
    assert set(spanish) == {"hola", "adios"}
    assert spanish["adios"].back == "goodbye"
    assert spanish["adios"].tags == ("greetings", "a1")
    assert spanish["hola"].is_learning
    assert [item.front for item in store.all_items(deck_id="french")] == ["bonjour"]

    # importing the same file again adds nothing
    assert import_items(store, load_items_csv(path, default_deck="spanish")) == (0, 3)


def test_missing_columns(tmp_path):
    path = write_csv(tmp_path, "question,answer\nhola,hello\n")
    with pytest.raises(ValueError, match="must contain columns"):
        load_items_csv(path, default_deck="spanish")
