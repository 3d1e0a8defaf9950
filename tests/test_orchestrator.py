"""
Tests for cleanup orchestration (end-to-end over in-memory stores).
"""

import logging
from unittest.mock import MagicMock

import bson
from bson import ObjectId
from bson.codec_options import DEFAULT_CODEC_OPTIONS

from gridfs_cleaner.cancellation import CancellationToken
from gridfs_cleaner.maintenance import run_cleanup
from gridfs_cleaner.storage import MongoChunkStore
from gridfs_cleaner.storage.gc.scanner import scan_file_ids


class TestRunCleanupScenarios:
    """Reference scenarios for run_cleanup."""

    def test_scenario_a_execute(self, chunk_store, file_store, scenario_a, caplog):
        """F1 is valid, F2 is orphaned; execute mode deletes F2's 2 chunks."""
        f1, f2 = scenario_a
        caplog.set_level(logging.INFO, logger="gridfs_cleaner")

        result = run_cleanup(chunk_store, file_store, dry_run=False)

        assert result.status == "completed"
        assert result.valid_files == {f1}
        assert result.orphaned_files == {f2}
        assert result.stats.chunks_removed == 2
        assert result.stats.files_processed == 1
        assert result.stats.chunks_observed == 5
        assert result.exit_code == 0
        assert len(chunk_store.chunks) == 3
        assert f"Deleted 2 chunks from orphaned file {f2}" in caplog.text
        assert "Deleted 2 chunks from 1 orphaned files" in caplog.text

    def test_scenario_b_empty_collection(self, chunk_store, file_store):
        result = run_cleanup(chunk_store, file_store, dry_run=False)

        assert result.status == "completed"
        assert result.valid_files == frozenset()
        assert result.orphaned_files == frozenset()
        assert result.stats.files_processed == 0
        assert result.exit_code == 0

    def test_scenario_c_file_without_chunks_is_never_seen(self, chunk_store, file_store):
        """A file whose chunks are already gone never reaches the classifier."""
        present = ObjectId()
        chunk_store.add_file_chunks(present, 1)
        file_store.file_ids.add(present)

        result = run_cleanup(chunk_store, file_store, dry_run=False)

        assert result.status == "completed"
        assert file_store.lookups == [present]
        assert result.orphaned_files == frozenset()

    def test_scenario_d_dry_run(self, chunk_store, file_store, caplog):
        orphan = ObjectId()
        chunk_store.add_file_chunks(orphan, 10)
        caplog.set_level(logging.INFO, logger="gridfs_cleaner")

        result = run_cleanup(chunk_store, file_store, dry_run=True)

        assert result.dry_run is True
        assert result.stats.chunks_per_orphan == {orphan: 10}
        assert len(chunk_store.chunks) == 10
        assert chunk_store.delete_calls == []
        assert "could delete 10 chunks" in caplog.text
        assert "Would delete 10 chunks from 1 orphaned files" in caplog.text


class TestRunCleanupProperties:
    """Invariants of the full pipeline."""

    def test_orphan_classified_once_regardless_of_chunk_count(self, chunk_store, file_store):
        orphan = ObjectId()
        chunk_store.add_file_chunks(orphan, 50)

        result = run_cleanup(chunk_store, file_store, dry_run=True)

        assert file_store.lookups == [orphan]
        assert result.orphaned_files == {orphan}
        assert result.stats.distinct_files_observed == 1

    def test_second_execute_run_finds_nothing(self, chunk_store, file_store, scenario_a):
        first = run_cleanup(chunk_store, file_store, dry_run=False)
        second = run_cleanup(chunk_store, file_store, dry_run=False)

        assert first.stats.chunks_removed == 2
        assert second.orphaned_files == frozenset()
        assert second.stats.chunks_removed == 0
        assert second.stats.files_processed == 0

    def test_dry_run_never_mutates(self, chunk_store, file_store, scenario_a):
        before = list(chunk_store.chunks)

        run_cleanup(chunk_store, file_store, dry_run=True)

        assert chunk_store.chunks == before

    def test_no_delete_while_scan_cursor_open(self, chunk_store, file_store):
        for _ in range(5):
            chunk_store.add_file_chunks(ObjectId(), 4)

        result = run_cleanup(chunk_store, file_store, dry_run=False)

        assert result.stats.files_processed == 5
        assert chunk_store.deletes_while_cursor_open == 0
        assert chunk_store.chunks == []

    def test_worker_pool_matches_sequential(self, chunk_store, file_store):
        ids = [ObjectId() for _ in range(12)]
        for file_id in ids:
            chunk_store.add_file_chunks(file_id, 2)
        file_store.file_ids.update(ids[:4])

        result = run_cleanup(chunk_store, file_store, dry_run=False, classify_workers=4)

        assert result.valid_files == set(ids[:4])
        assert result.orphaned_files == set(ids[4:])
        assert result.stats.chunks_removed == 16


class TestRunCleanupFailures:
    """Abort, cancellation and per-file failure handling."""

    def test_scan_error_aborts_without_deleting(self, chunk_store, file_store):
        for _ in range(4):
            chunk_store.add_file_chunks(ObjectId(), 3)
        chunk_store.fail_after_batches = 2

        result = run_cleanup(chunk_store, file_store, dry_run=False)

        assert result.status == "aborted"
        assert result.error is not None
        assert result.orphaned_files == frozenset()
        assert result.valid_files == frozenset()
        assert result.stats.distinct_files_observed == 0
        assert chunk_store.delete_calls == []
        assert len(chunk_store.chunks) == 12
        assert result.exit_code == 2

    def test_lookup_error_aborts_scan(self, chunk_store, file_store):
        bad = ObjectId()
        chunk_store.add_file_chunks(bad, 1)
        file_store.fail_for.add(bad)

        result = run_cleanup(chunk_store, file_store, dry_run=False)

        assert result.status == "aborted"
        assert chunk_store.delete_calls == []

    def test_cancelled_scan_skips_reconciliation(self, chunk_store, file_store, monkeypatch):
        for _ in range(3):
            chunk_store.add_file_chunks(ObjectId(), 3)
        token = CancellationToken()

        def cancelling_scan(store, stats, cancel_token):
            for batch in scan_file_ids(store, stats, cancel_token):
                yield batch
                token.cancel("SIGINT")

        monkeypatch.setattr(
            "gridfs_cleaner.maintenance.orchestrator.scan_file_ids", cancelling_scan
        )

        result = run_cleanup(chunk_store, file_store, dry_run=False, cancel_token=token)

        assert result.status == "cancelled"
        assert result.exit_code == 0
        assert result.stats.chunks_observed == 3
        assert chunk_store.delete_calls == []

    def test_failed_file_reported_and_others_processed(self, chunk_store, file_store):
        ids = sorted(ObjectId() for _ in range(3))
        for file_id in ids:
            chunk_store.add_file_chunks(file_id, 2)
        chunk_store.fail_for.add(ids[0])

        result = run_cleanup(chunk_store, file_store, dry_run=False)

        assert result.status == "completed"
        assert result.failed_files == [ids[0]]
        assert result.processed_files == ids[1:]
        assert result.exit_code == 2

    def test_undecodable_chunk_batch_aborts_without_deleting(self, file_store, caplog):
        """A corrupt raw batch from the server ends in an aborted run, not a crash."""
        valid = ObjectId()
        file_store.file_ids.add(valid)
        corrupt = bson.encode({"files_id": "ab"}).replace(b"ab\x00", b"\xff\xfe\x00")
        collection = MagicMock()
        collection.codec_options = DEFAULT_CODEC_OPTIONS
        collection.full_name = "db.packages.chunks"
        collection.find_raw_batches.return_value.__enter__.return_value = iter(
            [bson.encode({"files_id": valid}), corrupt]
        )
        caplog.set_level(logging.INFO, logger="gridfs_cleaner")

        result = run_cleanup(MongoChunkStore(collection), file_store, dry_run=False)

        assert result.status == "aborted"
        assert result.exit_code == 2
        assert result.valid_files == frozenset()
        assert result.stats.chunks_observed == 1
        assert result.stats.distinct_files_observed == 0
        collection.delete_many.assert_not_called()
        assert "Run aborted by store error" in caplog.text
