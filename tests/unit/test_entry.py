"""
Tests for log entries.
"""

import pytest

from hother.logfacade import Entry, Level, with_exit_func, with_level


class TestEntryDerivation:
    """Test that entries are immutable and derive copies."""

    def test_with_field_returns_new_entry(self, logger):
        """Test deriving leaves the original untouched."""
        base = logger.entry()
        derived = base.with_field("key", "value")

        assert derived is not base
        assert base.fields == {}
        assert derived.fields == {"key": "value"}

    def test_with_fields_merges(self, logger):
        """Test later fields override earlier ones."""
        entry = logger.with_fields({"a": 1, "b": 2}).with_fields({"b": 3, "c": 4})

        assert entry.fields == {"a": 1, "b": 3, "c": 4}

    def test_siblings_do_not_share_fields(self, logger):
        """Test entries derived from the same parent are independent."""
        parent = logger.with_field("shared", True)
        first = parent.with_field("first", 1)
        second = parent.with_field("second", 2)

        assert "second" not in first.fields
        assert "first" not in second.fields
        assert parent.fields == {"shared": True}

    def test_fields_is_a_copy(self, logger):
        """Test mutating the returned fields does not change the entry."""
        entry = logger.with_field("key", "value")
        entry.fields["key"] = "changed"

        assert entry.fields == {"key": "value"}

    def test_input_mapping_is_copied(self, logger):
        """Test later changes to the caller's dict do not leak in."""
        source = {"key": "value"}
        entry = logger.with_fields(source)
        source["key"] = "changed"

        assert entry.fields == {"key": "value"}

    def test_with_error(self, logger):
        """Test errors are stored under the error key."""
        err = ValueError("boom")

        assert logger.with_error(err).fields == {"error": err}

    def test_with_context(self, logger):
        """Test the context is carried over to derived entries."""
        context = {"request_id": "abc"}
        entry = logger.with_context(context).with_field("key", "value")

        assert entry.context is context
        assert entry.fields == {"key": "value"}

    def test_entry_bound_to_logger(self, logger):
        """Test entries keep their logger."""
        entry = Entry(logger, {"a": 1})

        assert entry.logger is logger
        assert entry.with_field("b", 2).logger is logger


class TestEntryLogging:
    """Test records written by entries."""

    def test_fields_written(self, logger, capture):
        """Test fields appear in the record next to the message."""
        logger.with_fields({"user": "alice", "attempt": 3}).info("signed in")

        record = capture.last()
        assert record["level"] == "info"
        assert record["msg"] == "signed in"
        assert record["user"] == "alice"
        assert record["attempt"] == 3

    def test_error_written_as_message(self, logger, capture):
        """Test exceptions are encoded as their message."""
        logger.with_error(ValueError("boom")).error("failed")

        assert capture.last()["error"] == "boom"

    def test_plain_args_joined(self, logger, capture):
        """Test plain variants join their arguments with spaces."""
        logger.info("a", 1, None, 2.5)

        assert capture.last()["msg"] == "a 1 None 2.5"

    def test_no_args_empty_message(self, logger, capture):
        """Test a call without arguments writes an empty message."""
        logger.with_field("only", "fields").info()

        assert capture.last()["msg"] == ""

    def test_formatted(self, logger, capture):
        """Test formatted variants use printf-style formatting."""
        logger.infof("%s has %d items", "cart", 3)

        assert capture.last()["msg"] == "cart has 3 items"

    def test_formatted_without_args(self, logger, capture):
        """Test a format without args is written verbatim."""
        logger.infof("100% done")

        assert capture.last()["msg"] == "100% done"

    def test_bad_format_does_not_raise(self, logger, capture):
        """Test a mismatched format still writes a record."""
        logger.infof("%d items", "many")

        assert capture.last()["msg"] == "%d items many"

    @pytest.mark.parametrize(
        "method,level_name",
        [
            ("debug", "debug"),
            ("info", "info"),
            ("warn", "warning"),
            ("warning", "warning"),
            ("error", "error"),
        ],
    )
    def test_leveled_methods(self, logger, capture, method, level_name):
        """Test each leveled method writes at its level."""
        getattr(logger.entry(), method)("message")
        getattr(logger.entry(), method + "f")("formatted %s", "message")

        records = capture.records()
        assert [r["level"] for r in records] == [level_name, level_name]
        assert records[1]["msg"] == "formatted message"

    def test_generic_log(self, logger, capture):
        """Test log and logf accept levels and plain ints."""
        entry = logger.with_field("k", "v")
        entry.log(Level.ERROR, "as level")
        entry.log(3, "as int")
        entry.logf(Level.WARN, "%s", "formatted")

        assert [r["level"] for r in capture.records()] == ["error", "info", "warning"]

    def test_generic_log_out_of_range(self, logger, capture):
        """Test unknown numeric levels are written at debug."""
        logger.entry().log(42, "odd level")

        assert capture.last()["level"] == "debug"

    def test_level_filtering(self, make_logger, capture):
        """Test records below the logger level are dropped."""
        logger = make_logger(with_level(Level.WARN))
        entry = logger.with_field("k", "v")

        entry.debug("dropped")
        entry.info("dropped")
        entry.warn("kept")
        entry.error("kept")

        assert [r["msg"] for r in capture.records()] == ["kept", "kept"]

    @pytest.mark.parametrize("minimum", list(Level))
    @pytest.mark.parametrize("logged", list(Level))
    def test_level_filtering_every_pair(self, make_logger, capture, minimum, logged):
        """Test a record is written exactly when its level is at most the logger level."""
        codes = []
        logger = make_logger(with_level(minimum), with_exit_func(codes.append))

        logger.log(logged, "msg")

        records = capture.records()
        if logged <= minimum:
            assert len(records) == 1
            assert records[0]["level"] == logged.display_name
        else:
            assert records == []
        assert codes == ([1] if logged is Level.FATAL else [])


class TestEntryFatal:
    """Test fatal records terminate the process."""

    @pytest.mark.parametrize(
        "call",
        [
            lambda e: e.fatal("bye"),
            lambda e: e.fatalf("bye %s", "now"),
            lambda e: e.log(Level.FATAL, "bye"),
            lambda e: e.logf(Level.FATAL, "bye %s", "now"),
        ],
    )
    def test_fatal_calls_exit_after_write(self, make_logger, capture, call):
        """Test every fatal entry point writes, then exits with code 1."""
        codes = []

        def exit_func(code):
            # The record is written before the exit function runs
            assert capture.records()[-1]["level"] == "fatal"
            codes.append(code)

        logger = make_logger(with_exit_func(exit_func))
        call(logger.with_field("k", "v"))

        assert codes == [1]

    def test_fatal_default_exits(self, logger, capture):
        """Test the default exit function raises SystemExit(1)."""
        with pytest.raises(SystemExit) as exc_info:
            logger.with_field("k", "v").fatal("bye")

        assert exc_info.value.code == 1
        assert capture.last()["msg"] == "bye"

    def test_non_fatal_does_not_exit(self, make_logger, capture):
        """Test lower levels never call the exit function."""
        codes = []
        logger = make_logger(with_exit_func(codes.append))

        logger.entry().error("not fatal")

        assert codes == []
