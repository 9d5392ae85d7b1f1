import pytest
from django.contrib.auth.models import User

from matching.models import Message, Profile, Report


@pytest.mark.django_db
def test_user_and_profile_creation():
    user = User.objects.create_user(username="testuser", password="password123")
    profile = Profile.objects.create(
        user=user, display_name="Test", location="Madrid", bio="Hello world", age=30
    )

    assert Profile.objects.count() == 1
    assert profile.user.username == "testuser"
    assert profile.location == "Madrid"
    assert profile.profile_visible is True
    assert str(profile) == "Test"


@pytest.mark.django_db
def test_projection_leaves_out_hidden_fields(make_profile):
    user = make_profile(
        "Jordan", age=31, location="Oakland", pronouns="she/her",
        gender_identity="transgender woman", sexual_orientation="lesbian",
        age_visible=False, location_visible=False,
    )
    view = Profile.objects.get(pk=user.id).project()

    assert view["user_id"] == user.id
    assert view["display_name"] == "Jordan"
    assert view["pronouns"] == "she/her"
    assert view["gender_identity"] == "transgender woman"
    assert "age" not in view
    assert "location" not in view


@pytest.mark.django_db
def test_report_status_only_moves_forward(make_profile):
    reporter = make_profile()
    target = make_profile()
    report = Report.objects.create(
        reporter=reporter, target_kind=Report.TargetKind.USER, target_user=target, reason="spam"
    )

    report.advance(Report.Status.REVIEWED)
    report.advance("reviewed")
    assert report.status == Report.Status.REVIEWED

    with pytest.raises(ValueError):
        report.advance(Report.Status.PENDING)

    report.advance(Report.Status.CLOSED)
    report.refresh_from_db()
    assert report.status == Report.Status.CLOSED


@pytest.mark.django_db
def test_messages_are_immutable(matched_pair):
    alice, bob, match = matched_pair
    message = Message.objects.create(
        conversation=match.conversation, sequence=1, sender=alice, content="hi"
    )
    message.content = "edited"

    with pytest.raises(ValueError):
        message.save()

    message.read_by.add(bob)
    assert set(message.read_by.values_list("id", flat=True)) == {bob.id}
