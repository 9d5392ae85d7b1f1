import pytest

from matching.exceptions import NotFoundError
from matching.models import Profile
from matching.stores import ProfileStore, default_store


@pytest.mark.django_db
def test_is_visible_follows_profile_flags(make_profile):
    user = make_profile(age=40, age_visible=False, pronouns="he/him")

    assert default_store.is_visible(user.id, "age") is False
    assert default_store.is_visible(user.id, "pronouns") is True
    # fields without a visibility flag are always shown
    assert default_store.is_visible(user.id, "display_name") is True
    with pytest.raises(NotFoundError):
        default_store.is_visible(user.id + 1000, "age")


@pytest.mark.django_db
def test_get_unknown_profile(db):
    with pytest.raises(NotFoundError):
        default_store.get(31337)
    with pytest.raises(NotFoundError):
        default_store.get("abc")


@pytest.mark.django_db
def test_list_created_after_breaks_ties_by_id(make_profile):
    users = [make_profile() for _ in range(4)]
    same_time = Profile.objects.get(pk=users[0].id).created_at
    Profile.objects.filter(pk__in=[u.id for u in users]).update(created_at=same_time)

    first = default_store.list_created_after(None, 2)
    rest = default_store.list_created_after((same_time, first[-1].pk), 10)

    assert [p.pk for p in first + rest] == sorted((u.id for u in users), reverse=True)


@pytest.mark.django_db
def test_store_can_be_scoped_to_a_queryset(make_profile):
    visible = make_profile()
    hidden = make_profile(profile_visible=False)
    store = ProfileStore(Profile.objects.filter(profile_visible=True))

    assert [p.pk for p in store.list_created_after(None, 10)] == [visible.id]
    with pytest.raises(NotFoundError):
        store.get(hidden.id)
