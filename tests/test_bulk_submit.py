import pytest

from core.bulk_submit import BulkResult, NothingToSubmitError, delete_rows, submit_rows


def test_all_rows_succeed():
    rows = [{"value": f"10.0.0.{i}"} for i in range(5)]
    created = []

    result = submit_rows(rows, lambda row: created.append(row) or {"id": len(created)})

    assert result.success_count == len(rows)
    assert result.error_count == 0
    assert result.all_succeeded
    assert created == rows
    assert result.results == [{"id": i} for i in range(1, 6)]


def test_failures_are_isolated_and_order_is_kept():
    calls = []

    def create(row):
        calls.append(row["n"])
        if row["n"] in (1, 3):
            raise RuntimeError(f"row {row['n']} rejected")
        return row

    result = submit_rows([{"n": n} for n in range(5)], create)

    assert calls == [0, 1, 2, 3, 4]
    assert result.success_count == 3
    assert result.error_count == 2
    assert result.total == 5
    assert not result.all_succeeded
    assert [(f.index, f.error) for f in result.failures] == [
        (1, "row 1 rejected"),
        (3, "row 3 rejected"),
    ]


def test_progress_is_reported_after_each_row():
    progress = []

    def create(row):
        if row == "b":
            raise ValueError("bad")

    submit_rows(["a", "b", "c"], create, on_progress=lambda done, total: progress.append((done, total)))

    assert progress == [(1, 3), (2, 3), (3, 3)]


def test_empty_input_is_rejected():
    with pytest.raises(NothingToSubmitError, match="No data to submit"):
        submit_rows([], lambda row: None)
    with pytest.raises(NothingToSubmitError, match="No data to delete"):
        delete_rows(iter(()), lambda rid: None)


def test_errors_are_masked():
    def create(row):
        raise RuntimeError("401 for Bearer abcdefghijklmnop")

    result = submit_rows([{}], create)
    assert "abcdefghijklmnop" not in result.failures[0].error


def test_exception_without_message_uses_class_name():
    def create(row):
        raise KeyError()

    result = submit_rows([{}], create)
    assert result.failures[0].error == "KeyError"


def test_delete_rows():
    deleted = []
    result = delete_rows(["a", "b"], deleted.append)
    assert deleted == ["a", "b"]
    assert result.summary("IOC entries", action="delete") == "Successfully deleted 2 IOC entries"


@pytest.mark.parametrize("success,errors,expected", [
    (8, 2, "Successfully created 8 IOC entries, 2 failed"),
    (3, 0, "Successfully created 3 IOC entries"),
    (0, 4, "Failed to create any IOC entries"),
])
def test_summary(success, errors, expected):
    result = BulkResult(success_count=success, error_count=errors)
    assert result.summary("IOC entries") == expected
