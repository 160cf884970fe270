"""Tests for the benchmark runner against an in-memory client."""

import re

import pytest

from s3bench.results import OperationKind
from s3bench.runner import BenchmarkRunner
from tests.conftest import FakeStorageClient, make_config


def _runner(client, out, **overrides):
    return BenchmarkRunner(make_config(**overrides), client, pause=0, out=out)


class TestRunCounts:
    """Call counts per iteration."""

    @pytest.mark.parametrize("n", [0, 1, 5])
    def test_list_and_put_once_per_iteration(self, n, fake_client, out):
        run_log = _runner(fake_client, out, iterations=n).run()

        assert run_log.count(OperationKind.LIST) == n
        assert run_log.count(OperationKind.PUT) == n
        assert run_log.count(OperationKind.GET) == n
        assert run_log.count(OperationKind.DELETE) == n

    def test_single_empty_object(self, fake_client, out):
        runner = _runner(fake_client, out, iterations=1, object_size=0)

        run_log = runner.run()

        assert [r.kind for r in run_log] == [
            OperationKind.LIST,
            OperationKind.PUT,
            OperationKind.GET,
            OperationKind.DELETE,
        ]
        assert all(r.success for r in run_log)
        assert run_log.pending_keys() == []
        assert runner.cleanup() == 0
        assert fake_client.objects == {}

    def test_payload_size(self, out):
        client = FakeStorageClient()
        captured = []
        original_put = client.put_object

        def put(key, data):
            captured.append(len(data))
            return original_put(key, data)

        client.put_object = put
        _runner(client, out, iterations=2, object_size=123).run()

        assert captured == [123, 123]

    def test_pause_between_iterations(self, mocker, fake_client, out):
        sleep = mocker.patch("s3bench.runner.time.sleep")
        runner = BenchmarkRunner(
            make_config(iterations=3), fake_client, pause=0.1, out=out,
        )

        runner.run()

        assert sleep.call_count == 3
        sleep.assert_called_with(0.1)


class TestChaining:
    """Get and Delete only follow a successful Put of the same round."""

    def test_all_puts_fail(self, out):
        client = FakeStorageClient(fail={"put": RuntimeError("AccessDenied")})

        run_log = _runner(client, out, iterations=4).run()

        assert run_log.count(OperationKind.LIST) == 4
        assert len(run_log.results_for(OperationKind.PUT, success=False)) == 4
        assert run_log.count(OperationKind.GET) == 0
        assert run_log.count(OperationKind.DELETE) == 0
        assert client.count("get") == 0
        assert client.count("delete") == 0
        assert [f.error for f in run_log.failures()] == ["AccessDenied"] * 4

    def test_get_and_delete_use_same_round_key(self, fake_client, out):
        _runner(fake_client, out, iterations=3).run()

        puts = fake_client.keys_for("put")
        assert len(set(puts)) == 3
        assert fake_client.keys_for("get") == puts
        assert fake_client.keys_for("delete") == puts

    def test_partial_put_failures(self, out):
        client = FakeStorageClient(
            script={"put": [None, RuntimeError("SlowDown"), None]},
        )

        run_log = _runner(client, out, iterations=3).run()

        successful_puts = run_log.results_for(OperationKind.PUT, success=True)
        assert len(successful_puts) == 2
        assert run_log.count(OperationKind.GET) == 2
        assert run_log.count(OperationKind.DELETE) == 2
        assert client.keys_for("get") == [r.object_key for r in successful_puts]

    def test_delete_attempted_after_failed_get(self, out):
        client = FakeStorageClient(fail={"get": RuntimeError("NoSuchKey")})

        run_log = _runner(client, out, iterations=2).run()

        assert run_log.count(OperationKind.DELETE) == 2
        assert all(
            r.success for r in run_log.results_for(OperationKind.DELETE)
        )
        assert run_log.pending_keys() == []

    def test_list_failure_does_not_stop_round(self, out):
        client = FakeStorageClient(fail={"list": RuntimeError("down")})

        run_log = _runner(client, out, iterations=2).run()

        assert run_log.count(OperationKind.PUT) == 2
        assert len(run_log.failures()) == 2


class TestResults:
    """Shape of recorded results."""

    def test_put_key_only_on_success(self, out):
        client = FakeStorageClient(script={"put": [None, RuntimeError("x")]})

        run_log = _runner(client, out, iterations=2).run()

        ok, failed = run_log.results_for(OperationKind.PUT)
        assert ok.object_key is not None
        assert ok.error is None
        assert failed.object_key is None
        assert failed.error == "x"

    def test_latencies_non_negative(self, fake_client, out):
        run_log = _runner(fake_client, out, iterations=3).run()

        assert all(r.latency_ms >= 0 for r in run_log)

    def test_key_format(self, fake_client, out):
        _runner(fake_client, out, iterations=1).run()

        (key,) = fake_client.keys_for("put")
        assert re.fullmatch(r"benchmark-\d+-[a-z0-9]{9}", key)


class TestProgressOutput:
    """Progress lines are written as calls complete."""

    def test_lines_per_operation(self, out):
        client = FakeStorageClient(fail={"get": RuntimeError("boom")})

        _runner(client, out, iterations=1).run()

        lines = out.getvalue().splitlines()
        assert "Starting S3 benchmark with 1 iterations" in lines
        assert "Iteration 1/1" in lines
        assert re.search(r"^  ListObjects: \d+\.\d\dms ✓$", out.getvalue(), re.M)
        assert re.search(r"^  GetObject: \d+\.\d\dms ✗$", out.getvalue(), re.M)
        assert re.search(r"^  DeleteObject: \d+\.\d\dms ✓$", out.getvalue(), re.M)


class TestCleanup:
    """End-of-run sweep deletes each leftover key exactly once."""

    def test_sweep_removes_keys_whose_delete_failed(self, out):
        client = FakeStorageClient(
            script={"delete": [RuntimeError("InternalError"), None, None]},
        )
        runner = _runner(client, out, iterations=2)

        run_log = runner.run()
        first_key = client.keys_for("put")[0]
        assert run_log.pending_keys() == [first_key]

        assert runner.cleanup() == 1
        assert run_log.pending_keys() == []
        assert client.objects == {}

    def test_each_key_deleted_exactly_once_successfully(self, out):
        client = FakeStorageClient(
            script={"delete": [RuntimeError("e1"), None, RuntimeError("e2")]},
        )
        runner = _runner(client, out, iterations=3)
        runner.run()
        runner.cleanup()

        puts = client.keys_for("put")
        deletes = client.keys_for("delete")
        # Each key: one in-iteration attempt, plus one sweep attempt if that failed
        assert sorted(deletes) == sorted(puts + [puts[0], puts[2]])
        assert deletes[3:] == [puts[0], puts[2]]
        assert client.objects == {}

    def test_sweep_failure_is_a_warning(self, mocker, out):
        client = FakeStorageClient(fail={"delete": RuntimeError("gone away")})
        runner = _runner(client, out, iterations=2)
        warn = mocker.patch.object(runner.logger, "warning")

        runner.run()
        deleted = runner.cleanup()

        assert deleted == 0
        assert len(runner.run_log.pending_keys()) == 2
        messages = [c.args[0] for c in warn.call_args_list]
        assert any("Failed to cleanup object" in m for m in messages)
        assert any("could not be removed" in m for m in messages)

    def test_no_sweep_when_nothing_pending(self, fake_client, out):
        runner = _runner(fake_client, out, iterations=2)
        runner.run()
        deletes_before = fake_client.count("delete")

        assert runner.cleanup() == 0
        assert fake_client.count("delete") == deletes_before
        assert "Cleaning up" not in out.getvalue()
