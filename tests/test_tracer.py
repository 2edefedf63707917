"""Tests for the tracer module."""

import json

import numpy as np
import pytest


class TestSummarize:
    """Tests for object summarization."""

    def test_numpy_array_summary(self):
        """Test that numpy arrays are summarized with shape and type."""
        from stitchgenie.tracer import summarize

        arr = np.zeros((100, 200, 4), dtype=np.uint8)
        summary = summarize(arr)

        assert "ndarray" in summary
        assert "100x200x4" in summary
        assert "uint8" in summary

    def test_bool_grid_summary(self):
        """Test that stitch grids report shape and occupied count."""
        from stitchgenie.tracer import summarize

        grid = np.zeros((3, 5), dtype=bool)
        grid[1, 1:4] = True

        assert summarize(grid) == "grid(3x5,on=3)"

    def test_summary_capped_length(self):
        """Test that summary never exceeds max length."""
        from stitchgenie.tracer import summarize

        large_dict = {f"key_{i}": f"value_{i}" for i in range(100)}
        summary = summarize(large_dict, max_len=30)

        assert len(summary) <= 30

    def test_list_summary(self):
        from stitchgenie.tracer import summarize

        summary = summarize([1, 2, 3, 4, 5])

        assert "list" in summary
        assert "len=5" in summary

    def test_string_summary(self):
        """Test long string summarization."""
        from stitchgenie.tracer import summarize

        summary = summarize("a" * 1000)

        assert "str" in summary
        assert "len=1000" in summary
        assert len(summary) <= 200

    def test_none_summary(self):
        from stitchgenie.tracer import summarize

        assert summarize(None) == "None"

    def test_pydantic_model_summary(self):
        """Test Pydantic model summarization."""
        from stitchgenie.models import GenerationConfig
        from stitchgenie.tracer import summarize

        summary = summarize(GenerationConfig())

        assert "GenerationConfig" in summary


class TestTracerSpan:
    """Tests for tracer span functionality."""

    def test_span_nesting(self, capsys):
        """Test that spans produce start/end lines plus the event."""
        from stitchgenie.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        try:
            with tracer.span("outer", module="test"):
                with tracer.span("inner", module="test"):
                    tracer.event("inside")
        finally:
            configure_tracer(enabled=False)

        lines = capsys.readouterr().err.strip().split("\n")

        assert len(lines) >= 5
        assert any("inside" in line for line in lines)

    def test_tracer_disabled_no_output(self, capsys):
        from stitchgenie.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=False)
        tracer = get_tracer()

        with tracer.span("test", module="test"):
            tracer.event("should not appear")

        assert capsys.readouterr().err == ""

    def test_level_filtering(self, capsys):
        """DEBUG events are dropped at INFO level."""
        from stitchgenie.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        try:
            get_tracer().event("hidden detail", level="DEBUG")
            get_tracer().event("shown warning", level="WARN")
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "hidden detail" not in err
        assert "shown warning" in err

    def test_json_output(self, capsys):
        """JSON mode writes one parseable object per line."""
        from stitchgenie.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO", json_output=True)
        try:
            get_tracer().event("hello", cells=12)
        finally:
            configure_tracer(enabled=False)

        line = capsys.readouterr().err.strip().split("\n")[-1]
        record = json.loads(line)
        assert record["level"] == "INFO"
        assert record["meta"]["cells"] == "12"

    def test_trace_file(self, temp_dir, capsys):
        import os

        from stitchgenie.tracer import configure_tracer, get_tracer

        path = os.path.join(temp_dir, "trace.log")
        configure_tracer(enabled=True, level="INFO", file_path=path)
        try:
            get_tracer().event("to file")
        finally:
            configure_tracer(enabled=False)

        with open(path, encoding="utf-8") as f:
            assert "to file" in f.read()


class TestTraceDecorator:
    """Tests for the @trace decorator."""

    def test_decorator_runs_function(self):
        from stitchgenie.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="test_func")
        def my_func(x):
            return x * 2

        assert my_func(5) == 10

    def test_decorator_with_exception(self, capsys):
        """Failures are logged and re-raised."""
        from stitchgenie.tracer import configure_tracer, trace

        configure_tracer(enabled=True, level="INFO")

        @trace(label="failing_func")
        def failing_func():
            raise ValueError("test error")

        try:
            with pytest.raises(ValueError):
                failing_func()
        finally:
            configure_tracer(enabled=False)

        assert "failed" in capsys.readouterr().err
