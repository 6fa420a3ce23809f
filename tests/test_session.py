"""Tests for the editor session and its notification order."""

import pytest

from session import EditorSession, ReadOnlyFieldError


@pytest.fixture
def session(editor_schema, sample):
    return EditorSession(editor_schema, sample)


class TestSubscriptions:
    def test_handlers_run_in_registration_order(self, session):
        calls = []
        session.subscribe(lambda s: calls.append("first"))
        session.subscribe(lambda s: calls.append("second"))
        session.set_field("root.basics.name", "Jane")
        assert calls == ["first", "second"]

    def test_unsubscribe(self, session):
        calls = []
        unsubscribe = session.subscribe(lambda s: calls.append(s.revision))
        unsubscribe()
        session.set_field("root.basics.name", "Jane")
        assert calls == []

    def test_nested_mutation_notifies_after_current_dispatch(self, session):
        calls = []

        def first(s):
            calls.append(("first", s.get_path("root.basics.name")))
            if s.get_path("root.basics.name") == "Jane":
                s.set_field("root.basics.name", "Janet")

        session.subscribe(first)
        session.subscribe(lambda s: calls.append(("second", s.get_path("root.basics.name"))))
        session.set_field("root.basics.name", "Jane")
        assert [name for name, _ in calls] == ["first", "second", "first", "second"]
        assert calls[-1] == ("second", "Janet")

    def test_handler_error_does_not_wedge_dispatch(self, session):
        def boom(s):
            raise RuntimeError("boom")

        unsubscribe = session.subscribe(boom)
        with pytest.raises(RuntimeError):
            session.set_field("root.basics.name", "Jane")
        unsubscribe()
        calls = []
        session.subscribe(lambda s: calls.append(1))
        session.set_field("root.basics.name", "Janet")
        assert calls == [1]


class TestValueAccess:
    def test_get_value_is_a_copy(self, session):
        value = session.get_value()
        value["basics"]["name"] = "Changed"
        assert session.get_path("root.basics.name") == "Richard Hendriks"

    def test_set_field_creates_containers(self, editor_schema):
        session = EditorSession(editor_schema)
        session.set_field("root.work.0", {})
        session.set_field("root.work.0.highlights.0", "Shipped")
        assert session.get_value() == {"work": [{"highlights": ["Shipped"]}]}

    def test_set_field_on_array_index(self, session):
        session.set_field("root.skills.0.name", "Compression")
        assert session.get_path("root.skills.0.name") == "Compression"

    def test_hidden_sections_are_read_only(self, session):
        with pytest.raises(ReadOnlyFieldError):
            session.set_field("root.meta.hiddenSections", ["work"])
        assert session.get_path("root.meta.hiddenSections") == []

    def test_hidden_section_items_are_read_only(self, session):
        with pytest.raises(ReadOnlyFieldError):
            session.set_field("root.meta.hiddenSections.0", "work")
        assert session.get_path("root.meta.hiddenSections") == []

    def test_meta_edit_keeps_hidden_sections(self, session):
        session.set_value({**session.get_value(), "meta": {"name": "X", "hiddenSections": ["work"]}})
        session.set_field("root.meta", {"name": "Y", "hiddenSections": ["skills", "skills"]})
        assert session.get_value()["meta"] == {"name": "Y", "hiddenSections": ["work"]}

    def test_root_edit_keeps_hidden_sections(self, session):
        session.set_value({**session.get_value(), "meta": {"hiddenSections": ["education"]}})
        session.set_field("root", {"basics": {"name": "Jane"}})
        assert session.get_value() == {"basics": {"name": "Jane"}, "meta": {"hiddenSections": ["education"]}}

    def test_parent_edit_cannot_add_hidden_sections(self, editor_schema):
        session = EditorSession(editor_schema, {"meta": {"name": "X"}})
        session.set_field("root.meta", {"name": "X", "hiddenSections": ["work"]})
        assert session.get_value()["meta"] == {"name": "X"}

    def test_sibling_meta_field_is_editable(self, session):
        session.set_field("root.meta.name", "Jane CV")
        assert session.get_path("root.meta.name") == "Jane CV"

    def test_set_sub_value_replaces_subtree(self, session):
        session.set_sub_value("root.meta", {"name": "X", "hiddenSections": ["work"]})
        assert session.get_value()["meta"] == {"name": "X", "hiddenSections": ["work"]}

    def test_missing_path_reads_none(self, session):
        assert session.get_path("root.basics.nothing.here") is None

    def test_load_reports_problems_but_replaces(self, session):
        problems = session.load({"basics": {"name": 42}})
        assert problems
        assert session.get_path("root.basics.name") == 42

    def test_revision_counts_commits(self, session):
        start = session.revision
        session.set_field("root.basics.name", "A")
        session.set_value({})
        assert session.revision == start + 2
