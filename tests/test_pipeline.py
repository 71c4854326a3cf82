"""
End-to-end tests for BatchPipeline against an in-memory store.
Run: python -m pytest tests/test_pipeline.py
"""

from media_index.pipeline import BatchPipeline
from media_index.store import PersistenceError


def test_area_tokens_are_merged_once(store, redis_client, make_detail):
    assert BatchPipeline(store, workers=1).ingest([make_detail(pid=1, area="USA/Canada")]) is None
    assert redis_client.hget("Search:Keys:Pid1", "area") == "USA,Canada"


def test_reingesting_a_record_leaves_vocabulary_unchanged(store, redis_client, make_detail):
    pipeline = BatchPipeline(store, workers=1)
    pipeline.ingest([make_detail()])
    first = redis_client.hgetall("Search:Keys:Pid1")
    pipeline.ingest([make_detail()])
    assert redis_client.hgetall("Search:Keys:Pid1") == first


def test_malformed_update_time_sorts_first(store, make_detail):
    pipeline = BatchPipeline(store, workers=1)
    pipeline.ingest([
        make_detail(mid=1, updateTime="2024-05-01 12:00:00"),
        make_detail(mid=2, updateTime="not-a-date"),
    ])
    records = pipeline.index_writer.read_range("time", 1)
    assert records[0]["movieId"] == 2
    assert records[0]["timestamp"] == 0


def test_records_land_in_their_own_partitions(store, redis_client, make_detail):
    BatchPipeline(store, workers=1).ingest([
        make_detail(mid=1, pid=1, classTag="Action"),
        make_detail(mid=2, pid=2, classTag="Anime"),
    ])
    assert redis_client.hget("Search:Keys:Pid1", "tag") == "Action"
    assert redis_client.hget("Search:Keys:Pid2", "tag") == "Anime"
    assert redis_client.zcard("Search:TimeList:Pid2") == 1


def test_concurrent_updates_to_one_partition_keep_every_token(store, redis_client, make_detail):
    batch = [make_detail(mid=i, classTag=f"Tag{i:03d}") for i in range(60)]
    assert BatchPipeline(store, workers=8).ingest(batch) is None

    tags = redis_client.hget("Search:Keys:Pid1", "tag").split(",")
    assert sorted(tags) == sorted(f"Tag{i:03d}" for i in range(60))
    assert redis_client.zcard("Search:RankList:Pid1") == 60


def test_vocabulary_failure_does_not_block_index_writes(failing_store, redis_client, make_detail):
    error = BatchPipeline(failing_store({"HMSET"}), workers=1).ingest([make_detail(mid=1), make_detail(mid=2)])
    assert isinstance(error, PersistenceError)
    assert error.operation == "HMSET"
    assert redis_client.hgetall("Search:Keys:Pid1") == {}
    assert redis_client.zcard("Search:TimeList:Pid1") == 2


def test_last_error_is_returned(failing_store, make_detail):
    store = failing_store({"ZADD"}, key_marker="Pid")
    error = BatchPipeline(store, workers=1).ingest([make_detail(mid=1, pid=1), make_detail(mid=2, pid=7)])
    assert error.key.endswith("Pid7")


def test_empty_batch(store):
    assert BatchPipeline(store).ingest([]) is None


def test_default_pipeline_appends_tokens_in_arrival_order(store, redis_client, make_detail):
    pipeline = BatchPipeline(store)
    assert pipeline.workers == 1

    tags = [f"Tag{i:03d}" for i in range(40, 0, -1)]
    pipeline.ingest([make_detail(mid=i, classTag=tag) for i, tag in enumerate(tags)])
    assert redis_client.hget("Search:Keys:Pid1", "tag") == ",".join(tags)
