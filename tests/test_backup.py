# ==============================================
# Tests for Backup Export / Restore
# ==============================================

import json
from dataclasses import replace
from datetime import datetime
from types import SimpleNamespace

import pytest

from smartzprod.backup.codec import (
    backup_filename,
    export_snapshot,
    import_snapshot,
    parse_snapshot,
)
from smartzprod.calculation.record_factory import (
    build_match_factor_record,
    build_productivity_record,
)
from smartzprod.config import BackupConfig
from smartzprod.errors import RestoreError, StorageError
from smartzprod.persistence.kv_storage import JsonFileStorage
from smartzprod.persistence.record_store import CollectionKind, PersistentStore, UserSettings

NOW = datetime(2026, 1, 15, 8, 30, 5)


def backup_text(productivity_entries, match_factor_entries=()):
    """Backup JSON built from already-encoded entry texts."""
    return ('{"productivityData": [' + ", ".join(productivity_entries)
            + '], "matchFactorData": [' + ", ".join(match_factor_entries) + "]}")


@pytest.fixture
def populated_store(store, productivity_inputs, match_factor_inputs):
    store.append(CollectionKind.PRODUCTIVITY, build_productivity_record(productivity_inputs))
    store.append(CollectionKind.PRODUCTIVITY,
                 build_productivity_record(dict(productivity_inputs, excavator_id="EX02")))
    store.append(CollectionKind.MATCH_FACTOR, build_match_factor_record(match_factor_inputs))
    store.save_user_settings("Budi Santoso", "NRP12345")
    return store


@pytest.fixture
def other_store(tmp_path):
    return PersistentStore(JsonFileStorage(str(tmp_path / "other")))


class TestExport:
    def test_filename(self):
        assert backup_filename(NOW) == "SmartzProd-Backup-2026-01-15T08-30-05.json"
        config = BackupConfig(file_prefix="Site7")
        assert backup_filename(NOW, config) == "Site7-2026-01-15T08-30-05.json"

    def test_envelope(self, populated_store):
        snapshot = export_snapshot(populated_store, now=NOW)
        assert snapshot.content_type == "application/json"
        assert snapshot.filename.startswith("SmartzProd-Backup-")

        envelope = json.loads(snapshot.content)
        assert envelope["version"] == BackupConfig().app_version
        assert envelope["exportDate"] == "2026-01-15T08:30:05"
        assert len(envelope["productivityData"]) == 2
        assert len(envelope["matchFactorData"]) == 1
        assert envelope["userSettings"] == {"nama": "Budi Santoso", "nrp": "NRP12345"}
        assert envelope["metadata"] == {
            "totalProductivity": 2,
            "totalMatchFactor": 1,
            "totalRecords": 3,
            "excavators": ["EX01", "EX02"],
        }

    def test_export_does_not_modify_store(self, populated_store):
        before = populated_store.productivity_records
        export_snapshot(populated_store)
        assert populated_store.productivity_records == before


class TestRestore:
    def test_round_trip(self, populated_store, other_store):
        snapshot = export_snapshot(populated_store, now=NOW)
        assert import_snapshot(other_store, snapshot.content) == 3
        assert other_store.productivity_records == populated_store.productivity_records
        assert other_store.match_factor_records == populated_store.match_factor_records
        assert other_store.load_user_settings() == populated_store.load_user_settings()

    def test_restore_replaces_not_merges(self, populated_store, other_store, productivity_inputs):
        old = build_productivity_record(dict(productivity_inputs, excavator_id="OLD1"))
        other_store.append(CollectionKind.PRODUCTIVITY, old)

        import_snapshot(other_store, export_snapshot(populated_store).content)
        excavators = [r.excavator_id for r in other_store.productivity_records]
        assert "OLD1" not in excavators
        assert other_store.get(CollectionKind.PRODUCTIVITY, old.record_id) is None

    def test_restored_data_is_persisted(self, populated_store, other_store):
        import_snapshot(other_store, export_snapshot(populated_store).content)
        reloaded = PersistentStore(other_store.storage)
        assert reloaded.count() == 3

    def test_user_settings_optional(self, other_store):
        raw = json.dumps({"productivityData": [], "matchFactorData": []})
        other_store.save_user_settings("Siti", "456")
        assert import_snapshot(other_store, raw) == 0
        assert other_store.load_user_settings().supervisor_name == "Siti"


class TestMalformedBackups:
    @pytest.mark.parametrize("raw", [
        "not json",
        "[]",
        '{"matchFactorData": []}',
        '{"productivityData": [], "matchFactorData": {}}',
        '{"productivityData": [{"id": "x"}], "matchFactorData": []}',
    ])
    def test_rejected_and_store_untouched(self, populated_store, raw):
        before = (populated_store.productivity_records, populated_store.match_factor_records)
        with pytest.raises(RestoreError):
            import_snapshot(populated_store, raw)
        assert (populated_store.productivity_records, populated_store.match_factor_records) == before

    def test_parse_reports_missing_field(self):
        with pytest.raises(RestoreError) as exc:
            parse_snapshot('{"productivityData": []}')
        assert exc.value.code == "missing_field"

    def test_failed_persist_raises(self, populated_store, other_store, monkeypatch):
        content = export_snapshot(populated_store).content

        def broken_set(key, value):
            raise StorageError("read-only")
        monkeypatch.setattr(other_store.storage, "set", broken_set)

        with pytest.raises(RestoreError):
            import_snapshot(other_store, content)
        assert other_store.count() == 0

    def test_overflowing_count_rejected(self, populated_store, productivity_inputs):
        entry = json.dumps(build_productivity_record(productivity_inputs).to_dict())
        entry = entry.replace('"tripCount": 10', '"tripCount": 1e999')
        assert "1e999" in entry

        before = populated_store.productivity_records
        with pytest.raises(RestoreError) as exc:
            import_snapshot(populated_store, backup_text([entry]))
        assert exc.value.code == "invalid_record"
        assert populated_store.productivity_records == before

    @pytest.mark.parametrize("bad_id", [123, {"nested": "x"}, ["a"]])
    def test_non_string_id_rejected(self, productivity_inputs, bad_id):
        entry = build_productivity_record(productivity_inputs).to_dict()
        entry["id"] = bad_id
        with pytest.raises(RestoreError):
            parse_snapshot(backup_text([json.dumps(entry)]))


class TestRecordIds:
    def test_duplicate_ids_get_fresh_ids(self, other_store, productivity_inputs):
        first = build_productivity_record(productivity_inputs).to_dict()
        second = dict(first, excavatorId="EX02")
        raw = backup_text([json.dumps(first), json.dumps(second)])

        assert import_snapshot(other_store, raw) == 2
        records = other_store.productivity_records
        assert records[0].record_id == first["id"]
        assert records[1].record_id != first["id"]
        assert records[1].excavator_id == "EX02"

        # Each record is addressable on its own
        assert other_store.remove(CollectionKind.PRODUCTIVITY, records[1].record_id)
        assert [r.excavator_id for r in other_store.productivity_records] == ["EX01"]

    def test_same_id_in_both_collections_is_kept(self, productivity_inputs, match_factor_inputs):
        prod = build_productivity_record(productivity_inputs).to_dict()
        mf = build_match_factor_record(match_factor_inputs).to_dict()
        mf["id"] = prod["id"]

        productivity, match_factor, _ = parse_snapshot(
            backup_text([json.dumps(prod)], [json.dumps(mf)]))
        assert productivity[0].record_id == match_factor[0].record_id == prod["id"]


class TestNonFiniteExport:
    def test_infinite_value_not_written_as_json(self, productivity_inputs):
        record = replace(build_productivity_record(productivity_inputs), productivity=float("inf"))
        store = SimpleNamespace(
            productivity_records=[record],
            match_factor_records=[],
            load_user_settings=lambda: UserSettings("", ""),
        )
        with pytest.raises(StorageError):
            export_snapshot(store, now=NOW)
