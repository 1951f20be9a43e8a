"""Profile schema tests — username rules and belief tag normalization."""

import pytest
from pydantic import ValidationError

from arguably.schemas.profile import ProfileCreate, ProfileUpdate, normalize_beliefs


def test_normalize_beliefs_adds_hash_and_dedupes():
    assert normalize_beliefs(["climate", "#Climate", "  ", "free speech", "#tax"]) == [
        "#climate", "#freespeech", "#tax",
    ]


def test_username_stripped():
    assert ProfileCreate(username="  alice_1 ").username == "alice_1"


@pytest.mark.parametrize("username", ["ab", "x" * 31, "bad name", "semi;colon"])
def test_invalid_usernames_rejected(username):
    with pytest.raises(ValidationError):
        ProfileCreate(username=username)


def test_create_normalizes_beliefs():
    profile = ProfileCreate(username="alice", beliefs=["science"])
    assert profile.beliefs == ["#science"]


def test_update_only_tracks_sent_fields():
    update = ProfileUpdate.model_validate({"about_me": "hi"})
    assert update.model_dump(exclude_unset=True) == {"about_me": "hi"}


def test_invalid_phone_rejected():
    with pytest.raises(ValidationError):
        ProfileUpdate(phone_number="call me")
