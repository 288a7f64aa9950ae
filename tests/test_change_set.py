import pytest

from src.domain.change_set import classify_changes
from src.domain.errors import BadRequestError
from src.domain.field_catalog import ColumnDefinition, FieldKind, resolve_catalog
from src.domain.jira import FieldDescriptor


def test_status_key_goes_to_transition_bucket():
    change_set = classify_changes({"Status": " Done ", "Title": "x"})

    assert change_set.transition.target_value == "Done"
    assert change_set.field_changes == {"Title": "x"}


def test_without_status_there_is_no_transition():
    change_set = classify_changes({"Title": "x", "Status Notes": "y"})

    assert change_set.transition is None
    assert set(change_set.field_changes) == {"Title", "Status Notes"}


def test_empty_changes():
    assert classify_changes({}).is_empty


@pytest.mark.parametrize("value", [None, "", "   ", 3])
def test_status_value_must_be_text(value):
    with pytest.raises(BadRequestError):
        classify_changes({"Status": value})


def test_remote_fields_use_catalog_ids():
    catalog = resolve_catalog(
        [FieldDescriptor(id="customfield_1", name="Planned Release Date")],
        [ColumnDefinition(name="Planned Release Date", jira_name="Planned Release Date",
                          editable=True, kind=FieldKind.DATE)],
    )
    change_set = classify_changes({"planned release date": "2024-05-01T00:00:00.000+0000"})

    assert change_set.remote_fields(catalog) == {"customfield_1": "2024-05-01"}
