import pytest
from pydantic import ValidationError

from hackreg.models import TeamDocument, TeamUpdate, UserDocument


def _user(**overrides):
    data = dict(
        user_id="UID1",
        team_id="TID1",
        name="  Alice  ",
        gender="Female",
        email="  Alice.Smith@Example.COM ",
        contact="9876543210",
        college="City College",
        stream="CSE",
        year="2",
    )
    data.update(overrides)
    return UserDocument(**data)


def test_user_normalisation():
    u = _user()
    assert u.name == "Alice"
    assert u.gender == "female"
    assert u.email == "alice.smith@example.com"
    assert u.year == 2
    assert u.role == "participant"


def test_numeric_contact_is_accepted_as_string():
    assert _user(contact=9876543210).contact == "9876543210"


@pytest.mark.parametrize("contact", ["987654321", "98765432101", "98765x3210", ""])
def test_contact_must_be_ten_digits(contact):
    with pytest.raises(ValidationError):
        _user(contact=contact)


@pytest.mark.parametrize("email", ["alice", "alice@", "@example.com", "alice@example"])
def test_email_format(email):
    with pytest.raises(ValidationError):
        _user(email=email)


def test_gender_and_role_are_closed_sets():
    with pytest.raises(ValidationError):
        _user(gender="robot")
    with pytest.raises(ValidationError):
        _user(role="owner")


def test_participant_requires_team_admin_does_not():
    with pytest.raises(ValidationError):
        _user(team_id=None)
    assert _user(team_id=None, role="admin").role == "admin"


@pytest.mark.parametrize("size", [1, 5])
def test_team_size_bounds(size):
    with pytest.raises(ValidationError):
        TeamDocument(
            team_id="TID1", team_name="X", num_teammates=size,
            num_males=0, num_females=0, theme="Theme 1",
        )


def test_team_theme_enum():
    with pytest.raises(ValidationError):
        TeamDocument(
            team_id="TID1", team_name="X", num_teammates=2,
            num_males=0, num_females=0, theme="Theme 7",
        )


def test_team_update_only_sets_given_fields():
    upd = TeamUpdate(project_submission="https://x.example.com/p.zip")
    assert upd.model_dump(exclude_unset=True) == {"project_submission": "https://x.example.com/p.zip"}
    with pytest.raises(ValidationError):
        TeamUpdate(team_id="TID9")
