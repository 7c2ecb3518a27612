"""
Test error chains and the per-file report format.
"""

import io
from pathlib import Path

from rich.console import Console

from chronosort.errors import (CollisionError, ErrorKind, OperationError,
                               ResolutionError, SortError)
from chronosort.models import Action, PlacementDecision, ProcessingOutcome
from chronosort.reporting import Reporter


def raise_chained():
    try:
        try:
            raise FileNotFoundError(2, "No such file or directory")
        except FileNotFoundError as e:
            raise ResolutionError("failed to stat a.jpg") from e
    except ResolutionError as e:
        e.add_context("failed to determine date of a.jpg using file-modify")
        raise


class TestErrorChain:

    def test_kinds(self):
        assert ResolutionError("x").kind is ErrorKind.RESOLUTION
        assert CollisionError("x").kind is ErrorKind.COLLISION
        assert OperationError("x").kind is ErrorKind.OPERATION

    def test_chain_order(self):
        try:
            raise_chained()
        except SortError as e:
            error = e

        assert error.chain() == [
            "failed to determine date of a.jpg using file-modify",
            "failed to stat a.jpg",
            "[Errno 2] No such file or directory",
        ]

    def test_render(self):
        try:
            raise_chained()
        except SortError as e:
            error = e

        assert error.render() == (
            "failed to determine date of a.jpg using file-modify\n"
            "\n"
            "Caused by:\n"
            "    0: failed to stat a.jpg\n"
            "    1: [Errno 2] No such file or directory"
        )

    def test_single_layer_render(self):
        assert CollisionError("x exists").render() == "x exists"

    def test_nested_sort_error_cause(self):
        inner = OperationError("inner").add_context("middle")
        try:
            raise SortError("outer") from inner
        except SortError as e:
            assert e.chain() == ["outer", "middle", "inner"]
            assert str(e) == "outer: middle: inner"


class TestReporter:

    def test_brackets_and_colons_printed_verbatim(self, reporter):
        source = Path("/in/[2020] :smile: trip.jpg")
        decision = PlacementDecision(source=source, destination=Path("/out/2020/01/[2020] :smile: trip.jpg"))

        reporter.report(ProcessingOutcome(source=source, action=Action.HARDLINK, decision=decision))

        assert reporter.console.file.getvalue() == (
            "Hardlink /in/[2020] :smile: trip.jpg -> /out/2020/01/[2020] :smile: trip.jpg\n"
        )

    def test_long_lines_not_wrapped(self):
        out = io.StringIO()
        reporter = Reporter(console=Console(file=out, width=20), error_console=Console(file=io.StringIO()))
        source = Path("/a/very/long/directory/name/for/testing/photo.jpg")
        decision = PlacementDecision(source=source, destination=Path("/b/2020/01/photo.jpg"))

        reporter.report(ProcessingOutcome(source=source, action=Action.COPY, decision=decision))

        assert len(out.getvalue().splitlines()) == 1

    def test_error_block(self, reporter):
        error = CollisionError("/out/2020/01/a.jpg already exists, refusing to overwrite")
        reporter.report(ProcessingOutcome(source=Path("/in/a.jpg"), action=Action.MOVE, error=error))

        assert reporter.console.file.getvalue() == ""
        assert reporter.error_console.file.getvalue() == (
            "-----\n"
            "[error] /in/a.jpg\n"
            "/out/2020/01/a.jpg already exists, refusing to overwrite\n"
            "-----\n"
        )
