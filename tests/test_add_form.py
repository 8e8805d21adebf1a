import pytest

from markshelf.controllers.add_form import AddBookmarkForm
from markshelf.errors import AuthError, ConflictError, StoreError, ValidationError


@pytest.mark.parametrize(
    ("title", "url"),
    [("", "https://example.com"), ("Example", ""), ("   ", "  "), ("Example", "\t")],
)
def test_empty_fields_never_reach_the_store(fake_client, title, url):
    form = AddBookmarkForm(fake_client)

    with pytest.raises(ValidationError) as excinfo:
        form.submit(title, url)

    assert excinfo.value.message == "Title and URL are required"
    assert form.error_message == "Title and URL are required"
    assert fake_client.insert_calls == 0


def test_invalid_url_is_a_validation_error(fake_client):
    form = AddBookmarkForm(fake_client)

    with pytest.raises(ValidationError) as excinfo:
        form.submit("Example", "not a url")

    assert excinfo.value.message == "Invalid URL"
    assert fake_client.insert_calls == 0


def test_requires_signed_in_user(fake_client):
    fake_client.user = None
    form = AddBookmarkForm(fake_client)

    with pytest.raises(AuthError) as excinfo:
        form.submit("Example", "https://example.com")

    assert excinfo.value.message == "User not authenticated"
    assert fake_client.insert_calls == 0
    assert form.loading is False


def test_successful_submit_inserts_normalized_row_and_resets(fake_client):
    refreshes = []
    form = AddBookmarkForm(fake_client, on_added=lambda: refreshes.append(True))

    created = form.submit("  Docs  ", " HTTPS://Docs.Python.org/3/#intro ")

    assert created["title"] == "Docs"
    assert created["url"] == "https://docs.python.org/3"
    assert created["owner"] == 1
    assert refreshes == [True]
    assert (form.title, form.url, form.error_message) == ("", "", "")
    assert form.loading is False


def test_submit_uses_field_state_when_no_arguments(fake_client):
    form = AddBookmarkForm(fake_client)
    form.title = "Example"
    form.url = "https://example.com/"

    created = form.submit()

    assert created["url"] == "https://example.com/"


def test_duplicate_is_a_conflict(fake_client):
    form = AddBookmarkForm(fake_client)
    form.submit("First", "https://example.com/page")

    with pytest.raises(ConflictError) as excinfo:
        form.submit("Second", "https://EXAMPLE.com/page/")

    assert excinfo.value.message == "Bookmark already exists"
    assert len(fake_client.rows) == 1
    # fields are kept so the user can fix them
    assert form.title == "Second"


def test_store_failure_is_generic_and_logged(fake_client, caplog):
    fake_client.fail_inserts = StoreError()
    called = []
    form = AddBookmarkForm(fake_client, on_added=lambda: called.append(True))

    with pytest.raises(StoreError) as excinfo:
        form.submit("Example", "https://example.com")

    assert excinfo.value.message == "Something went wrong"
    assert form.error_message == "Something went wrong"
    assert form.loading is False
    assert called == []
    assert "Bookmark insert failed" in caplog.text
