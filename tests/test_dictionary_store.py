import pytest

from rucheng_dialect.core import DictionaryStore, MalformedDictionaryError


@pytest.mark.parametrize("payload", [None, [1, 2, 3], "汝", 42, True])
def test_load_rejects_non_object_payloads(payload):
    store = DictionaryStore()

    with pytest.raises(MalformedDictionaryError):
        store.load(payload)

    assert store.size() == 0


def test_load_empty_object_gives_empty_store():
    store = DictionaryStore()

    store.load({})

    assert store.size() == 0
    assert list(store.entries()) == []


def test_load_rejects_non_list_records():
    store = DictionaryStore()

    with pytest.raises(MalformedDictionaryError):
        store.load({"汝": {"phonetic": "ru35"}})


def test_load_skips_empty_keys(caplog):
    store = DictionaryStore()

    with caplog.at_level("WARNING", logger="rucheng_dialect"):
        store.load({"": [{"phonetic": "xx"}], "汝": [{"phonetic": "ru35"}]})

    assert store.size() == 1
    assert "" not in store
    assert store.get("汝") == [{"phonetic": "ru35"}]
    assert "Skipped invalid dictionary keys" in caplog.text
    assert '"skipped": 1' in caplog.text


def test_failed_load_keeps_previous_mapping(sample_dictionary):
    store = DictionaryStore()
    store.load(sample_dictionary)

    with pytest.raises(MalformedDictionaryError):
        store.load({"汝": "ru35"})

    assert store.size() == len(sample_dictionary)
    assert store.get("汝") == sample_dictionary["汝"]


def test_get_returns_records_or_none(sample_dictionary):
    store = DictionaryStore()
    store.load(sample_dictionary)

    assert store.get("汝城") == [{"phonetic": "ru35-cheŋ21", "meaning": "县名"}]
    assert store.get("无") is None
    assert "汝" in store
    assert "无" not in store


def test_entries_are_restartable_and_keep_insertion_order(sample_dictionary):
    store = DictionaryStore()
    store.load(sample_dictionary)

    entries = store.entries()
    first_pass = [key for key, _ in entries]
    second_pass = [key for key, _ in entries]

    assert first_pass == list(sample_dictionary)
    assert second_pass == first_pass
    assert len(entries) == len(sample_dictionary)


def test_load_replaces_rather_than_merges(sample_dictionary):
    store = DictionaryStore()
    store.load(sample_dictionary)

    store.load({"水": [{"phonetic": "xy33"}]})

    assert store.size() == 1
    assert store.get("汝") is None
    assert len(store) == 1


def test_records_pass_through_unmodified():
    record = {"phonetic": "ru35", "extra": {"nested": [1, 2]}}
    store = DictionaryStore()

    store.load({"汝": [record]})

    assert store.get("汝")[0] is record
