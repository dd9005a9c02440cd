"""Tests for scope expression rendering."""

import pytest

from sysdig_client.scope import EventScope, Scope, Selection, Selector


class TestScope:
    @pytest.mark.unit
    def test_empty_scope(self):
        scope = Scope()

        assert str(scope) == ""
        assert not scope

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("build", "expected"),
        [
            (lambda s: s.add_is("foo", "bar"), "foo = 'bar'"),
            (lambda s: s.add_is_not("foo", "bar"), "foo != 'bar'"),
            (lambda s: s.add_contains("foo", "bar"), "foo contains 'bar'"),
            (lambda s: s.add_does_not_contain("foo", "bar"), "not foo contains 'bar'"),
            (lambda s: s.add_starts_with("foo", "bar"), "foo starts with 'bar'"),
            (lambda s: s.add_in("foo", "bar", "baz"), "foo in ('bar', 'baz')"),
            (lambda s: s.add_not_in("foo", "bar", "baz"), "not foo in ('bar', 'baz')"),
        ],
    )
    def test_single_selection(self, build, expected):
        assert str(build(Scope())) == expected

    @pytest.mark.unit
    def test_selections_are_joined_with_and(self):
        scope = Scope().add_is("a", "b").add_is("c", "d").add_in("e", "f")

        assert str(scope) == "a = 'b' and c = 'd' and e in ('f')"

    @pytest.mark.unit
    def test_add_selection_accepts_selector_text(self):
        scope = Scope().add_selection("starts with", "host.hostName", "web-")

        assert scope.selections == [Selection(Selector.STARTS_WITH, "host.hostName", ("web-",))]

    @pytest.mark.unit
    def test_unknown_selector_is_rejected(self):
        with pytest.raises(ValueError):
            Scope().add_selection("like", "foo", "bar")

    @pytest.mark.unit
    def test_selections_is_a_copy(self):
        scope = Scope().add_is("foo", "bar")

        scope.selections.clear()

        assert str(scope) == "foo = 'bar'"

    @pytest.mark.unit
    def test_repr(self):
        assert repr(Scope().add_is("foo", "bar")) == "Scope(\"foo = 'bar'\")"


class TestEventScope:
    @pytest.mark.unit
    def test_labels_render_in_insertion_order(self):
        scope = EventScope({"host.hostName": "web-1", "kube_cluster_name": "prod"})

        assert str(scope) == "host.hostName = 'web-1' and kube_cluster_name = 'prod'"

    @pytest.mark.unit
    def test_add_is_chains(self):
        scope = EventScope().add_is("foo", "bar").add_is("baz", "qux")

        assert str(scope) == "foo = 'bar' and baz = 'qux'"

    @pytest.mark.unit
    def test_empty(self):
        assert not EventScope()
        assert str(EventScope()) == ""
