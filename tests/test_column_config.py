from ticket_portal.core.column_config import get_columns, load_column_sets, reset_cache


def test_column_sets_load():
    reset_cache()
    sets = load_column_sets()
    assert {"core", "ticket_list", "admin"} <= set(sets)
    assert get_columns("ticket_list")[0] == "ticket_number"
    assert get_columns("unknown") == []


def test_missing_yaml_falls_back(tmp_path):
    reset_cache()
    try:
        sets = load_column_sets(tmp_path)
        assert "comment_count" in sets["core"]
        assert "notes" in sets["admin"]
    finally:
        reset_cache()


def test_partial_yaml_keeps_defaults(tmp_path):
    (tmp_path / "columns.yaml").write_text("sets:\n  ticket_list: [ticket_number, status]\n")
    reset_cache()
    try:
        sets = load_column_sets(tmp_path)
        assert sets["ticket_list"] == ["ticket_number", "status"]
        assert "email" in sets["admin"]
    finally:
        reset_cache()
