"""Tests for composable Serial / Parallel / Map nodes."""

from conftest import echo, immediate, later, source

from paraflow import Map, Parallel, Serial, parallel, serial


def double(value, done):
    later(0.01, done, None, value * 2)


class TestSerialNode:
    def test_runs_children_in_order(self, recorder):
        node = Serial([source(value=3), double, double], name="Chain")
        node(recorder)
        assert recorder.wait() == (None, 12)

    def test_empty(self, recorder):
        Serial([])(recorder)
        assert recorder.calls == [(None, None)]

    def test_default_name_and_repr(self):
        node = Serial([])
        assert node.name == "Serial"
        assert repr(node) == "Serial(name='Serial')"

    def test_copies_children(self):
        children = [source(value=1)]
        node = Serial(children)
        children.append(source(value=2))
        assert len(node.children) == 1


class TestParallelNode:
    def test_collects_results(self, recorder):
        Parallel([source(value="a"), source(value="b")])(recorder)
        assert recorder.wait() == (None, ["a", "b"])

    def test_error(self, recorder):
        error = ValueError("err")
        Parallel([source(value=1), source(error=error)])(recorder)
        assert recorder.wait() == (error, [])

    def test_metadata(self):
        node = Parallel([], name="Fanout", metadata={"owner": "search"})
        assert node.name == "Fanout"
        assert node.metadata == {"owner": "search"}


class TestMapNode:
    def test_maps_values(self, recorder):
        Map(double)([1, 2, 3], recorder)
        assert recorder.wait() == (None, [2, 4, 6])

    def test_name_from_operation(self):
        assert Map(double).name == "Map[double]"
        assert Map(double, name="Doubler").name == "Doubler"

    def test_error(self, recorder):
        error = ValueError("err")
        Map(echo(error=error, failed_value=2))([1, 2, 3], recorder)
        assert recorder.wait() == (error, [])


class TestComposition:
    def test_serial_fans_out_with_map(self, recorder):
        Serial([source(value=[1, 2, 3]), Map(double)])(recorder)
        assert recorder.wait() == (None, [2, 4, 6])

    def test_parallel_of_serials(self, recorder):
        node = Parallel([
            Serial([source(value=1), double]),
            Serial([source(value=10), double, double]),
        ])
        node(recorder)
        assert recorder.wait() == (None, [2, 40])

    def test_nodes_inside_runners(self, recorder):
        parallel([Serial([immediate(value="x")]), Parallel([immediate(value="y")])], recorder)
        assert recorder.calls == [(None, ["x", ["y"]])]

    def test_serial_runner_with_nested_failure(self, recorder):
        error = RuntimeError("inner")
        third = echo()
        serial([Parallel([source(value=1), source(error=error)]), third], recorder)
        assert recorder.wait() == (error, [])
        assert third.inputs == []
