from streamlit.testing.v1 import AppTest


def records_page():
    import streamlit as st

    from core.resources import CollectionDefinition
    from core.validation import FieldSpec, RowSchema
    from tabs.collection_page import _render_records

    class CachedCollection:
        """Hands back the same list on every read, like a warm response cache."""

        def __init__(self, rows):
            self.definition = CollectionDefinition(
                key="hosts", label="Hosts", group="Assets", endpoint="/hosts",
                noun="host entries", schema=RowSchema([FieldSpec("name")]), page_size=10,
            )
            self.key = self.definition.key
            self.rows = rows

        def list(self, refresh=False):
            return self.rows

    if "collection" not in st.session_state:
        st.session_state.collection = CachedCollection(
            [{"id": str(i), "name": f"host{i}"} for i in range(1, 26)]
        )
    _render_records(st.session_state.collection)


def page_indicator(at):
    return next(m.value for m in at.markdown if "rows</div>" in m.value)


def test_next_and_previous_move_between_pages():
    at = AppTest.from_function(records_page, default_timeout=30).run()
    assert not at.exception
    assert "Page 1 of 3 · 25 rows" in page_indicator(at)

    at.button(key="hosts_next").click().run()
    assert not at.exception
    assert "Page 2 of 3" in page_indicator(at)

    at.button(key="hosts_next").click().run()
    assert "Page 3 of 3" in page_indicator(at)

    at.button(key="hosts_prev").click().run()
    assert "Page 2 of 3" in page_indicator(at)


def test_page_survives_plain_reruns():
    at = AppTest.from_function(records_page, default_timeout=30).run()
    at.button(key="hosts_next").click().run()

    at.run()

    assert "Page 2 of 3" in page_indicator(at)
    assert at.session_state["table_hosts"].current_page == 2
