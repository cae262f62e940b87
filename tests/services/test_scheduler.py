"""Tests for BootstrapScheduler wave execution."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable

import pytest

from monoboot.domain.package import Package
from monoboot.infrastructure.graph import PackageGraph
from monoboot.services.result import ServiceError, ServiceResult
from monoboot.services.scheduler import BootstrapScheduler, InstallOutcome
from tests.conftest import make_package


class RecordingInstaller:
    """Thread-safe fake installer tracking start/finish order and concurrency."""

    def __init__(
        self,
        *,
        fail: Iterable[str] = (),
        delay: float = 0.0,
        delays: dict[str, float] | None = None,
    ) -> None:
        self._fail = set(fail)
        self._delay = delay
        self._delays = delays or {}
        self._lock = threading.Lock()
        self.in_flight = 0
        self.max_in_flight = 0
        self.started: list[str] = []
        self.finished: list[str] = []
        self.events: list[tuple[str, str]] = []

    def __call__(self, pkg: Package) -> ServiceResult:
        with self._lock:
            self.started.append(pkg.name)
            self.events.append(("start", pkg.name))
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self._delays.get(pkg.name, self._delay))
        finally:
            with self._lock:
                self.in_flight -= 1
                self.finished.append(pkg.name)
                self.events.append(("end", pkg.name))
        if pkg.name in self._fail:
            return ServiceResult(
                ok=False,
                op="install",
                error=ServiceError(code="INSTALL_FAILED", message=f"{pkg.name} broke"),
            )
        return ServiceResult(ok=True, op="install")


class RecordingProgress:
    def __init__(self) -> None:
        self.total: int | None = None
        self.labels: list[str] = []
        self.terminated = 0

    def init(self, total: int) -> None:
        self.total = total

    def tick(self, label: str) -> None:
        self.labels.append(label)

    def terminate(self) -> None:
        self.terminated += 1


def _scheduler(
    packages: list[Package],
    install: Callable[[Package], ServiceResult],
    **kwargs: object,
) -> BootstrapScheduler:
    return BootstrapScheduler(PackageGraph(packages), packages, install, **kwargs)  # type: ignore[arg-type]


class TestWaves:
    def test_linked_and_ranged_dependents_share_second_wave(self) -> None:
        packages = [
            make_package("A", "1.2.0"),
            make_package("B", deps={"A": "^1.0.0"}),
            make_package("C", deps={"A": "file:../A"}),
        ]
        installer = RecordingInstaller()
        result = _scheduler(packages, installer).run()

        assert result.ok
        assert result.data["waves"][0] == ["A"]
        assert sorted(result.data["waves"][1]) == ["B", "C"]
        assert sorted(result.data["completed"]) == ["A", "B", "C"]
        assert result.data["processed"] == 3
        assert result.data["total"] == 3

    def test_incompatible_range_runs_in_first_wave(self) -> None:
        packages = [
            make_package("A", deps={"B": "^2.0.0"}),
            make_package("B", "1.0.0"),
        ]
        result = _scheduler(packages, RecordingInstaller()).run()
        assert result.ok
        assert result.data["waves"] == [["A", "B"]]

    def test_spaced_range_orders_waves(self) -> None:
        packages = [
            make_package("a", "1.2.3"),
            make_package("b", deps={"a": ">= 1.2.0"}),
        ]
        result = _scheduler(packages, RecordingInstaller()).run()
        assert result.ok
        assert result.data["waves"] == [["a"], ["b"]]

    def test_next_wave_is_pure(self) -> None:
        packages = [make_package("a"), make_package("b", deps={"a": "*"})]
        scheduler = _scheduler(packages, RecordingInstaller())
        assert [p.name for p in scheduler.next_wave(packages, {})] == ["a"]
        assert [p.name for p in scheduler.next_wave(packages[1:], {"a": True})] == ["b"]
        assert [p.name for p in scheduler.next_wave(packages, {})] == ["a"]

    def test_empty_subset_succeeds(self) -> None:
        progress = RecordingProgress()
        result = _scheduler([], RecordingInstaller(), progress=progress).run()
        assert result.ok
        assert result.data["processed"] == 0
        assert progress.total == 0
        assert progress.terminated == 1


class TestOrdering:
    def test_every_package_once_after_its_dependencies(self) -> None:
        packages = [
            make_package("app", deps={"ui": "*", "api": "*"}),
            make_package("ui", deps={"core": "*"}),
            make_package("api", deps={"core": "*", "util": "*"}),
            make_package("core", deps={"util": "*"}),
            make_package("util"),
            make_package("docs"),
        ]
        graph = PackageGraph(packages)
        installer = RecordingInstaller(delay=0.01)
        result = BootstrapScheduler(graph, packages, installer, concurrency=4).run()

        assert result.ok
        assert sorted(installer.started) == sorted(p.name for p in packages)
        assert len(installer.started) == len(set(installer.started))
        events = installer.events
        for node in graph:
            for dep in node.dependency_names:
                assert events.index(("end", dep)) < events.index(("start", node.name))


class TestConcurrency:
    @pytest.mark.parametrize("limit", [1, 2, 3])
    def test_never_exceeds_limit(self, limit: int) -> None:
        packages = [make_package(f"p{i}") for i in range(8)]
        installer = RecordingInstaller(delay=0.02)
        result = _scheduler(packages, installer, concurrency=limit).run()
        assert result.ok
        assert installer.max_in_flight <= limit
        assert len(installer.finished) == 8

    def test_runs_in_parallel_when_allowed(self) -> None:
        packages = [make_package(f"p{i}") for i in range(4)]
        barrier = threading.Barrier(4, timeout=5)

        def install(pkg: Package) -> ServiceResult:
            barrier.wait()
            return ServiceResult(ok=True, op="install")

        result = _scheduler(packages, install, concurrency=4).run()
        assert result.ok

    def test_invalid_concurrency(self) -> None:
        with pytest.raises(ValueError, match="concurrency"):
            _scheduler([make_package("a")], RecordingInstaller(), concurrency=0)

    def test_package_outside_graph_rejected(self) -> None:
        graph = PackageGraph([make_package("a")])
        with pytest.raises(ValueError, match="not in graph"):
            BootstrapScheduler(graph, [make_package("b")], RecordingInstaller())


class TestFailures:
    def test_failure_drains_wave_and_stops(self) -> None:
        packages = [
            make_package("B"),
            make_package("C"),
            make_package("D", deps={"C": "*"}),
        ]
        installer = RecordingInstaller(fail={"B"}, delays={"C": 0.05})
        result = _scheduler(packages, installer, concurrency=2).run()

        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INSTALL_FAILED"
        assert result.error.detail["package"] == "B"
        assert "C" in installer.finished
        assert "D" not in installer.started
        assert result.data["completed"] == ["C"]
        assert result.data["failed"] == ["B"]
        assert result.data["processed"] == 2

    def test_first_failure_is_error_rest_are_warnings(self) -> None:
        packages = [make_package("x"), make_package("y")]
        installer = RecordingInstaller(fail={"x", "y"}, delays={"y": 0.05})
        result = _scheduler(packages, installer, concurrency=2).run()

        assert result.error is not None
        assert result.error.message == "x broke"
        assert result.warnings == ["y broke"]

    def test_raising_installer_counts_as_failure(self) -> None:
        def install(pkg: Package) -> ServiceResult:
            raise RuntimeError("disk full")

        result = _scheduler([make_package("a")], install).run()
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INSTALL_FAILED"
        assert "disk full" in result.error.message

    def test_failed_result_without_error(self) -> None:
        def install(pkg: Package) -> ServiceResult:
            return ServiceResult(ok=False, op="install")

        result = _scheduler([make_package("a")], install).run()
        assert result.error is not None
        assert result.error.detail == {"package": "a"}

    def test_outcome_without_error_still_reports(self) -> None:
        scheduler = _scheduler([make_package("a"), make_package("b")], RecordingInstaller())
        failures = [InstallOutcome(name="a", ok=False), InstallOutcome(name="b", ok=False)]
        result = scheduler._failed(failures, [], [["a", "b"]], 2)
        assert result.error is not None
        assert result.error.code == "INSTALL_FAILED"
        assert result.error.detail == {"package": "a"}
        assert result.warnings == ["b: install failed"]
        assert result.data["failed"] == ["a", "b"]


class TestCycles:
    def test_two_package_cycle_fails_fast(self) -> None:
        packages = [
            make_package("X", deps={"Y": "*"}),
            make_package("Y", deps={"X": "*"}),
        ]
        installer = RecordingInstaller()
        result = _scheduler(packages, installer).run()

        assert not result.ok
        assert result.error is not None
        assert result.error.code == "CYCLIC_DEPENDENCY"
        assert result.error.detail["cycles"] == [["X", "Y"]]
        assert sorted(result.error.detail["packages"]) == ["X", "Y"]
        assert installer.started == []

    def test_stall_after_progress_names_blocked_packages(self) -> None:
        packages = [
            make_package("base"),
            make_package("x", deps={"base": "*", "y": "*"}),
            make_package("y", deps={"x": "*"}),
            make_package("z", deps={"x": "*"}),
        ]
        installer = RecordingInstaller()
        result = _scheduler(packages, installer).run()

        assert not result.ok
        assert result.error is not None
        assert result.error.code == "CYCLIC_DEPENDENCY"
        assert installer.started == ["base"]
        assert result.error.detail["packages"] == ["x", "y", "z"]
        assert result.error.detail["cycles"] == [["x", "y"]]
        assert result.data["completed"] == ["base"]


class TestProgress:
    def test_one_tick_per_package(self) -> None:
        packages = [make_package("a"), make_package("b", deps={"a": "*"}), make_package("c")]
        progress = RecordingProgress()
        _scheduler(packages, RecordingInstaller(), progress=progress).run()

        assert progress.total == 3
        assert sorted(progress.labels) == ["a", "b", "c"]
        assert progress.labels[-1] == "b"
        assert progress.terminated == 1

    def test_failed_packages_tick_and_terminate(self) -> None:
        progress = RecordingProgress()
        packages = [make_package("a"), make_package("b", deps={"a": "*"})]
        _scheduler(packages, RecordingInstaller(fail={"a"}), progress=progress).run()

        assert progress.labels == ["a"]
        assert progress.terminated == 1

    def test_cycle_terminates_progress(self) -> None:
        progress = RecordingProgress()
        packages = [make_package("a", deps={"a": "*"})]
        _scheduler(packages, RecordingInstaller(), progress=progress).run()
        assert progress.labels == []
        assert progress.terminated == 1
